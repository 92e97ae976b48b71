from tomorrow_architect.models.storage import StorageEntry
from tomorrow_architect.models.task import TaskCategory, TaskPriority

__all__ = [
    "StorageEntry",
    "TaskCategory",
    "TaskPriority",
]
