from dataclasses import dataclass
from typing import Sequence

from tomorrow_architect.schemas.task import Task


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int
    percent: int


def progress(tasks: Sequence[Task]) -> Progress:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.is_completed)
    percent = 0 if total == 0 else int(completed * 100 / total + 0.5)
    return Progress(completed=completed, total=total, percent=percent)
