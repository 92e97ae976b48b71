"""Single-blob persistence for the task collection.

The blob is a JSON envelope ``{"schemaVersion": N, "tasks": [...]}``. A bare
JSON array is the version 1 layout and is upgraded on load. Each migration step
fills the defaults for fields that older versions did not carry.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Iterable

from pydantic import ValidationError
from sqlalchemy.orm import Session

from tomorrow_architect.db.seed import seed_tasks
from tomorrow_architect.models.storage import StorageEntry
from tomorrow_architect.models.task import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    TaskCategory,
    TaskPriority,
)
from tomorrow_architect.schemas.task import Task

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2

_CATEGORIES = {category.value for category in TaskCategory}
_PRIORITIES = {priority.value for priority in TaskPriority}


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _upgrade_v1(record: dict[str, Any]) -> dict[str, Any]:
    """v1 -> v2: category became mandatory; normalize every optional field."""
    upgraded = dict(record)
    category = upgraded.get("category")
    if category not in _CATEGORIES:
        upgraded["category"] = DEFAULT_CATEGORY.value
    if upgraded.get("priority") not in _PRIORITIES:
        upgraded["priority"] = DEFAULT_PRIORITY.value
    upgraded["isCompleted"] = bool(upgraded.get("isCompleted", False))
    created_at = upgraded.get("createdAt")
    if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
        upgraded["createdAt"] = 0
    else:
        upgraded["createdAt"] = int(created_at)
    upgraded["estimatedDuration"] = _positive_int(upgraded.get("estimatedDuration"))
    suggested = upgraded.get("suggestedTime")
    upgraded["suggestedTime"] = suggested if isinstance(suggested, str) and suggested else None
    return upgraded


MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _upgrade_v1,
}


def _to_task(record: dict[str, Any]) -> Task | None:
    if not isinstance(record.get("id"), str) or not record["id"]:
        logger.warning(f"Dropping stored task without an id: {record!r}")
        return None
    if not isinstance(record.get("targetDate"), str):
        logger.warning(f"Dropping stored task without a target date: {record['id']}")
        return None
    if not isinstance(record.get("content"), str):
        record = {**record, "content": str(record.get("content") or "")}
    try:
        return Task.model_validate(record)
    except ValidationError as e:
        logger.warning(f"Dropping invalid stored task {record['id']}: {e}")
        return None


def migrate_records(records: Iterable[Any], from_version: int = 1) -> list[Task]:
    """Upgrade raw records to the current schema and validate them.

    Non-object entries and records that cannot become a Task are dropped.
    Records are kept in their original order; later duplicates of an id are
    dropped so ids stay unique.
    """
    tasks: list[Task] = []
    seen: set[str] = set()
    for record in records:
        if not isinstance(record, dict):
            logger.warning(f"Dropping non-object task record: {record!r}")
            continue
        version = from_version
        while version < SCHEMA_VERSION:
            record = MIGRATIONS[version](record)
            version += 1
        task = _to_task(record)
        if task is None:
            continue
        if task.id in seen:
            logger.warning(f"Dropping duplicate task id: {task.id}")
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks


def decode_blob(raw: str) -> list[Task]:
    """Decode a stored blob of any known version. Raises ValueError if unusable."""
    payload = json.loads(raw)
    if isinstance(payload, list):
        return migrate_records(payload, from_version=1)
    if isinstance(payload, dict) and isinstance(payload.get("tasks"), list):
        version = payload.get("schemaVersion", 1)
        if not isinstance(version, int) or version < 1 or version > SCHEMA_VERSION:
            raise ValueError(f"Unsupported schema version: {version!r}")
        # Current-version records still go through normalization
        return migrate_records(payload["tasks"], from_version=min(version, SCHEMA_VERSION - 1))
    raise ValueError("Stored blob is neither a task array nor a versioned envelope")


def encode_blob(tasks: Iterable[Task]) -> str:
    return json.dumps(
        {"schemaVersion": SCHEMA_VERSION, "tasks": [task.to_record() for task in tasks]},
        ensure_ascii=False,
    )


class PersistenceAdapter:
    """Loads and saves the whole collection under one storage key."""

    def __init__(self, session_factory: Callable[[], Session], storage_key: str):
        self.session_factory = session_factory
        self.storage_key = storage_key

    def load(self, tomorrow_key: str) -> list[Task]:
        """Return the stored collection, or the seed dataset if none is usable."""
        with self.session_factory() as db:
            entry = db.get(StorageEntry, self.storage_key)
            raw = entry.value if entry else None
        if raw is None:
            logger.info(f"No stored tasks under {self.storage_key}; loading seed data")
            return seed_tasks(tomorrow_key)
        try:
            return decode_blob(raw)
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Failed to parse stored tasks, falling back to seed data: {e}")
            return seed_tasks(tomorrow_key)

    def save(self, tasks: Iterable[Task]) -> None:
        blob = encode_blob(tasks)
        with self.session_factory() as db:
            entry = db.get(StorageEntry, self.storage_key)
            if entry is None:
                entry = StorageEntry(key=self.storage_key, value=blob)
                db.add(entry)
            else:
                entry.value = blob
                entry.updated_at = datetime.utcnow()
            entry.schema_version = SCHEMA_VERSION
            db.commit()

    def clear(self) -> None:
        with self.session_factory() as db:
            entry = db.get(StorageEntry, self.storage_key)
            if entry is not None:
                db.delete(entry)
                db.commit()
