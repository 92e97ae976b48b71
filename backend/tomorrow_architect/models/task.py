from enum import Enum as PyEnum


class TaskPriority(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCategory(str, PyEnum):
    WORK = "work"
    PERSONAL = "personal"
    RESEARCH = "research"
    ENTERTAINMENT = "entertainment"


DEFAULT_PRIORITY = TaskPriority.MEDIUM
DEFAULT_CATEGORY = TaskCategory.PERSONAL
