import enum


class StatsPeriod(str, enum.Enum):
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
