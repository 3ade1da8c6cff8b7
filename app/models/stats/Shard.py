import enum


class Shard(str, enum.Enum):
    STEAM = "steam"
    XBOX = "xbox"
    PSN = "psn"
