"""Bulk export and import of the whole task collection."""

from __future__ import annotations

import ast
import json
import logging
import pprint
import re
from typing import Any, Iterable

from tomorrow_architect.core.errors import ImportFormatError
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.persistence import migrate_records

logger = logging.getLogger(__name__)

# An array assigned to a name, as in a pasted seed or script file
_ASSIGNED_ARRAY = re.compile(r"=\s*\[")

SEED_MODULE_HEADER = '''from tomorrow_architect.schemas.task import Task

WELCOME_TASK_ID = "welcome-task-1"

# Regenerate with GET /transfer/export-seed to redeploy a backup as the default data.
SEED_TASKS = '''

SEED_MODULE_FOOTER = '''


def seed_tasks(tomorrow_key: str) -> list[Task]:
    """Built-in dataset; the welcome task is re-dated so it shows up tomorrow."""
    tasks = []
    for record in SEED_TASKS:
        task = Task.model_validate(record)
        if task.id == WELCOME_TASK_ID:
            task.target_date = tomorrow_key
        tasks.append(task)
    return tasks
'''


def export_json(tasks: Iterable[Task]) -> str:
    return json.dumps([task.to_record() for task in tasks], indent=2, ensure_ascii=False)


def export_seed_module(tasks: Iterable[Task]) -> str:
    """Render ``db/seed.py`` with the given tasks as its seed dataset."""
    records = [task.to_record() for task in tasks]
    literal = pprint.pformat(records, indent=4, width=100, sort_dicts=False)
    return SEED_MODULE_HEADER + literal + SEED_MODULE_FOOTER


def _balanced_array(text: str, start: int) -> str | None:
    """Return the bracketed literal opening at ``start``, skipping strings."""
    depth = 0
    quote = None
    escaped = False
    for position in range(start, len(text)):
        char = text[position]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in "\"'":
            quote = char
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return text[start:position + 1]
    return None


def extract_array_literal(text: str) -> str | None:
    """Find the first array literal assigned in a script file."""
    match = _ASSIGNED_ARRAY.search(text)
    start = match.end() - 1 if match else text.find("[")
    if start < 0:
        return None
    return _balanced_array(text, start)


def _decode_array(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    literal = extract_array_literal(text)
    if literal is None:
        raise ImportFormatError("Failed to parse data")
    try:
        return json.loads(literal)
    except json.JSONDecodeError:
        pass
    # A pasted seed module uses Python literal syntax
    try:
        return ast.literal_eval(literal)
    except (ValueError, SyntaxError, MemoryError, RecursionError) as e:
        logger.warning(f"Import payload could not be decoded: {e}")
        raise ImportFormatError("Failed to parse data") from None


def parse_import(text: str) -> list[Task]:
    """Decode a backup or pasted seed file into migrated tasks."""
    if not text or not text.strip():
        raise ImportFormatError("Failed to parse data")
    payload = _decode_array(text.strip())
    if not isinstance(payload, list):
        raise ImportFormatError("Invalid data format")
    if any(not isinstance(record, dict) for record in payload):
        raise ImportFormatError("Invalid data format")
    return migrate_records(payload)
