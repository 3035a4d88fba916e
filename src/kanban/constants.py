from enum import StrEnum


class TaskPriority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Lower rank sorts first
PRIORITY_RANK = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}

# Created at orders 0, 1, 2 with every new board
DEFAULT_COLUMNS = ["To Do", "In Progress", "Done"]

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
