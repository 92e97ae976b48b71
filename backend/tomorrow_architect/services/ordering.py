"""Display order for a day's task list.

Both views are stable sorts. Timed tasks come first in parsed-time order
(unparseable labels last among them); between two untimed tasks, ``high``
priority wins and everything else keeps storage order. Only the today view
pushes completed tasks to the bottom.
"""

from __future__ import annotations

from typing import Iterable

from tomorrow_architect.models.task import TaskPriority
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.time_labels import parse_time_label


def _schedule_key(task: Task) -> tuple[int, int, int]:
    if task.suggested_time:
        return (0, parse_time_label(task.suggested_time), 0)
    return (1, 0, 0 if task.priority == TaskPriority.HIGH else 1)


def today_sort_key(task: Task) -> tuple:
    return (task.is_completed, *_schedule_key(task))


def tomorrow_sort_key(task: Task) -> tuple:
    return _schedule_key(task)


def sort_today(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=today_sort_key)


def sort_tomorrow(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=tomorrow_sort_key)
