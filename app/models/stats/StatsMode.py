import enum


class StatsMode(str, enum.Enum):
    SOLO = "solo"
    DUO = "duo"
    SQUAD = "squad"
    ALL = "all"
