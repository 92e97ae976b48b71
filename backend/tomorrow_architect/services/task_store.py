"""In-memory task collection.

The store owns every Task. Mutations are serialized by a lock and announced to
an optional listener with a full snapshot; the persistence layer never sees
partial diffs.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Callable, Iterable, Mapping, Sequence

from tomorrow_architect.core.errors import TaskValidationError
from tomorrow_architect.models.task import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    TaskCategory,
    TaskPriority,
)
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.persistence import migrate_records

logger = logging.getLogger(__name__)

ChangeListener = Callable[[list[Task]], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    def __init__(
        self,
        tasks: Iterable[Task] = (),
        on_change: ChangeListener | None = None,
        id_factory: Callable[[], str] | None = None,
        clock_ms: Callable[[], int] | None = None,
    ):
        self._tasks: list[Task] = list(tasks)
        self._on_change = on_change
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._clock_ms = clock_ms or _now_ms
        self._lock = threading.RLock()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.all())

    def _index(self, task_id: str) -> int | None:
        for position, task in enumerate(self._tasks):
            if task.id == task_id:
                return position
        return None

    def all(self) -> list[Task]:
        """Return deep copies in storage order."""
        with self._lock:
            return [task.model_copy(deep=True) for task in self._tasks]

    def get(self, task_id: str) -> Task | None:
        with self._lock:
            position = self._index(task_id)
            return None if position is None else self._tasks[position].model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._tasks)

    def add(
        self,
        content: str,
        target_date: str,
        priority: TaskPriority = DEFAULT_PRIORITY,
        category: TaskCategory = DEFAULT_CATEGORY,
        estimated_duration: int | None = None,
    ) -> Task:
        text = (content or "").strip()
        if not text:
            raise TaskValidationError("Task content cannot be empty")
        if estimated_duration is not None and estimated_duration <= 0:
            raise TaskValidationError("Estimated duration must be a positive number of minutes")
        with self._lock:
            task_id = self._id_factory()
            while self._index(task_id) is not None:
                task_id = self._id_factory()
            task = Task(
                id=task_id,
                content=text,
                is_completed=False,
                target_date=target_date,
                priority=priority,
                category=category,
                created_at=self._clock_ms(),
                estimated_duration=estimated_duration,
            )
            self._tasks.append(task)
            logger.info(f"Task added: {task.id} | {target_date}")
            self._changed()
            return task.model_copy(deep=True)

    def toggle(self, task_id: str) -> Task | None:
        with self._lock:
            position = self._index(task_id)
            if position is None:
                return None
            task = self._tasks[position]
            task.is_completed = not task.is_completed
            self._changed()
            return task.model_copy(deep=True)

    def delete(self, task_id: str) -> bool:
        with self._lock:
            position = self._index(task_id)
            if position is None:
                return False
            del self._tasks[position]
            logger.info(f"Task deleted: {task_id}")
            self._changed()
            return True

    def move_to_day(self, task_ids: Iterable[str], day_key: str) -> int:
        """Re-date matching tasks and drop their suggested times."""
        wanted = set(task_ids)
        with self._lock:
            moved = 0
            for task in self._tasks:
                if task.id in wanted:
                    task.target_date = day_key
                    task.suggested_time = None
                    moved += 1
            if moved:
                logger.info(f"Moved {moved} task(s) to {day_key}")
                self._changed()
            return moved

    def merge_suggested_times(self, suggestions: Mapping[str, str]) -> int:
        with self._lock:
            merged = 0
            for task in self._tasks:
                if task.id in suggestions:
                    task.suggested_time = suggestions[task.id]
                    merged += 1
            if merged:
                self._changed()
            return merged

    def replace_all(self, records: Sequence[Mapping | Task]) -> int:
        """Swap in a whole new collection after running the schema migration."""
        raw = [
            record.to_record() if isinstance(record, Task) else dict(record)
            for record in records
        ]
        tasks = migrate_records(raw)
        with self._lock:
            self._tasks = tasks
            logger.info(f"Task collection replaced: {len(tasks)} task(s)")
            self._changed()
            return len(tasks)

    def filter_by_day(self, day_key: str) -> list[Task]:
        with self._lock:
            return [
                task.model_copy(deep=True)
                for task in self._tasks
                if task.target_date == day_key
            ]

    def unfinished(self, day_key: str) -> list[Task]:
        return [task for task in self.filter_by_day(day_key) if not task.is_completed]
