from enum import Enum

class TimeFrame(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
