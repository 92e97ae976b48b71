"""Working-day rules for suggested start times.

Any schedule, whether it comes from the advisory model or from the local
planner below, has to respect the same day layout:

    00:00-09:30  rest
    09:30-24:00  working hours
    12:00-13:30  lunch
    18:00-18:30  dinner

A task may not *start* inside a break, but it may run across one; the break is
then added to the wall-clock span it occupies before the next task can begin.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Sequence

from tomorrow_architect.core.errors import ScheduleResponseError
from tomorrow_architect.models.task import TaskPriority
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.day_window import REFERENCE_OFFSET_MINUTES, local_wall_clock
from tomorrow_architect.services.time_labels import (
    UNPARSEABLE_TIME,
    format_minutes,
    parse_time_label,
)

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
WORK_START = 9 * 60 + 30
WORK_END = MINUTES_PER_DAY
DEFAULT_DURATION_MINUTES = 30
START_ROUNDING_MINUTES = 15
TOMORROW_START_LABEL = format_minutes(WORK_START)


@dataclass(frozen=True)
class BreakWindow:
    name: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, minute: int) -> bool:
        return self.start <= minute < self.end


REST_WINDOW = BreakWindow("rest", 0, WORK_START)
LUNCH_BREAK = BreakWindow("lunch", 12 * 60, 13 * 60 + 30)
DINNER_BREAK = BreakWindow("dinner", 18 * 60, 18 * 60 + 30)
BREAKS = (LUNCH_BREAK, DINNER_BREAK)

PRIORITY_RANK = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}


@dataclass(frozen=True)
class ScheduleItem:
    """What the advisor is told about one task."""

    id: str
    content: str
    priority: str
    category: str
    duration: int

    @classmethod
    def from_task(cls, task: Task) -> "ScheduleItem":
        return cls(
            id=task.id,
            content=task.content,
            priority=task.priority.value,
            category=task.category.value,
            duration=task.estimated_duration or DEFAULT_DURATION_MINUTES,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "priority": self.priority,
            "category": self.category,
            "duration": self.duration,
        }


def build_schedule_request(tasks: Iterable[Task]) -> list[ScheduleItem]:
    return [ScheduleItem.from_task(task) for task in tasks]


def compute_start_label(
    now: datetime, offset_minutes: int = REFERENCE_OFFSET_MINUTES
) -> str:
    """Start label for scheduling the rest of today.

    Before 09:30 the day starts at 09:30. Later, the start is the next quarter
    hour strictly after the current minute (10:00 -> 10:15), wrapping past
    midnight to 00:00.
    """
    clock = local_wall_clock(now, offset_minutes)
    current = clock.minute_of_day
    if current < WORK_START:
        return TOMORROW_START_LABEL
    rounded = current + (START_ROUNDING_MINUTES - clock.minute % START_ROUNDING_MINUTES)
    return format_minutes(rounded % MINUTES_PER_DAY)


def correct_start(minute: int) -> int:
    """Defer a start out of the rest window or a break."""
    if REST_WINDOW.contains(minute):
        return WORK_START
    for window in BREAKS:
        if window.contains(minute):
            return window.end
    return minute


def occupied_until(start: int, duration: int | None) -> int:
    """Minute at which the next task may begin, counting spanned breaks."""
    end = start + (duration or DEFAULT_DURATION_MINUTES)
    for window in BREAKS:
        if start < window.start < end:
            end += window.length
    return end


def plan_sequence(items: Sequence[ScheduleItem], start_label: str) -> list[tuple[str, str]]:
    """Deterministic local schedule: high priority first, categories grouped.

    Tasks that would start at or after midnight are left unscheduled.
    """
    start = parse_time_label(start_label)
    if start == UNPARSEABLE_TIME:
        start = WORK_START

    first_seen: dict[str, int] = {}
    for item in items:
        first_seen.setdefault(item.category, len(first_seen))
    ordered = sorted(
        items,
        key=lambda item: (
            PRIORITY_RANK.get(TaskPriority(item.priority), 1),
            first_seen[item.category],
        ),
    )

    schedule: list[tuple[str, str]] = []
    cursor = start
    for item in ordered:
        begin = correct_start(cursor)
        if begin >= WORK_END:
            logger.info(f"Local planner ran out of day; {item.id} left unscheduled")
            continue
        schedule.append((item.id, format_minutes(begin)))
        cursor = occupied_until(begin, item.duration)
    return schedule


def _entry_time(entry: dict[str, Any]) -> Any:
    if "suggestedTime" in entry:
        return entry["suggestedTime"]
    return entry.get("time")


def validate_schedule_response(raw: Any, submitted_ids: Iterable[str]) -> dict[str, str]:
    """Check an advisor schedule and clamp it to the working-day rules.

    ``raw`` is the decoded response (or its JSON text). It must be an array of
    ``{"id", "suggestedTime"}`` objects (``"time"`` is accepted as the label
    key). Ids that were not submitted are ignored. Every label must be a valid
    minute of day; starts in the rest window or a break are deferred.

    Raises ScheduleResponseError when the response is empty or malformed, or
    when none of its entries refers to a submitted task.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ScheduleResponseError("Schedule response is not valid JSON") from e
    if not isinstance(raw, list):
        raise ScheduleResponseError("Schedule response is not an array")
    if not raw:
        raise ScheduleResponseError("Schedule response is empty")

    allowed = set(submitted_ids)
    accepted: dict[str, str] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            raise ScheduleResponseError("Schedule entry is not an object")
        task_id = entry.get("id")
        if not isinstance(task_id, str):
            raise ScheduleResponseError("Schedule entry is missing an id")
        if task_id not in allowed:
            logger.warning(f"Ignoring schedule entry for unknown task: {task_id}")
            continue
        if task_id in accepted:
            logger.warning(f"Ignoring duplicate schedule entry for task: {task_id}")
            continue
        label = _entry_time(entry)
        if not isinstance(label, str):
            raise ScheduleResponseError(f"Schedule entry for {task_id} is missing a time")
        minute = parse_time_label(label)
        if minute == UNPARSEABLE_TIME or not 0 <= minute < MINUTES_PER_DAY:
            raise ScheduleResponseError(f"Schedule entry has an invalid time: {label!r}")
        corrected = correct_start(minute)
        if corrected != minute:
            logger.info(
                f"Clamped start for {task_id}: {format_minutes(minute)} -> {format_minutes(corrected)}"
            )
        accepted[task_id] = format_minutes(corrected)

    if not accepted:
        raise ScheduleResponseError("Schedule response does not reference any submitted task")
    return accepted
