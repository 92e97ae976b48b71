"""Advisor calls with input checks, in-flight gating and safe merging.

At most one request per action kind may be outstanding. Nothing the advisor
returns touches the store until it has passed ``validate_schedule_response``;
any failure leaves every task as it was.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, Sequence

from tomorrow_architect.advisor.adapter import AdvisorAdapter
from tomorrow_architect.core.errors import (
    AdvisorBusyError,
    EmptyPlanError,
    ScheduleOptimizationFailed,
    ScheduleResponseError,
)
from tomorrow_architect.schemas.task import Task
from tomorrow_architect.services.day_window import REFERENCE_OFFSET_MINUTES, DayWindow
from tomorrow_architect.services.ordering import sort_today, sort_tomorrow
from tomorrow_architect.services.scheduling import (
    TOMORROW_START_LABEL,
    build_schedule_request,
    compute_start_label,
    validate_schedule_response,
)
from tomorrow_architect.services.task_store import TaskStore

logger = logging.getLogger(__name__)

EMPTY_REVIEW_MESSAGE = (
    "It looks like you haven't added any plans for tomorrow yet. "
    "Start by adding a few key tasks!"
)
REVIEW_UNAVAILABLE_MESSAGE = (
    "I'm having trouble connecting to the productivity cloud right now, "
    "but your plan looks solid!"
)
BLANK_REVIEW_MESSAGE = "Keep up the good work!"


class ActionKind(str, Enum):
    REVIEW = "review"
    OPTIMIZE_TOMORROW = "optimize_tomorrow"
    OPTIMIZE_TODAY = "optimize_today"


@dataclass
class ReviewResult:
    text: str
    fallback: bool = False


@dataclass
class OptimizationResult:
    start_time: str
    message: str
    scheduled: dict[str, str] = field(default_factory=dict)


class AdvisorService:
    def __init__(
        self,
        adapter: AdvisorAdapter,
        store: TaskStore,
        reference_offset_minutes: int = REFERENCE_OFFSET_MINUTES,
    ):
        self.adapter = adapter
        self.store = store
        self.reference_offset_minutes = reference_offset_minutes
        self._lock = threading.Lock()
        self._in_flight: set[ActionKind] = set()

    @contextmanager
    def _exclusive(self, kind: ActionKind) -> Iterator[None]:
        with self._lock:
            if kind in self._in_flight:
                raise AdvisorBusyError(f"A {kind.value} request is already running")
            self._in_flight.add(kind)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(kind)

    def is_busy(self, kind: ActionKind) -> bool:
        with self._lock:
            return kind in self._in_flight

    def review_tomorrow(self, window: DayWindow) -> ReviewResult:
        tasks = sort_tomorrow(self.store.filter_by_day(window.tomorrow_key))
        if not tasks:
            return ReviewResult(text=EMPTY_REVIEW_MESSAGE)
        with self._exclusive(ActionKind.REVIEW):
            try:
                text = self.adapter.review_plans(tasks)
            except Exception as e:
                logger.error(f"Error generating plan review: {e}")
                return ReviewResult(text=REVIEW_UNAVAILABLE_MESSAGE, fallback=True)
        if not isinstance(text, str) or not text.strip():
            return ReviewResult(text=BLANK_REVIEW_MESSAGE, fallback=True)
        return ReviewResult(text=text.strip())

    def optimize_tomorrow(self, window: DayWindow) -> OptimizationResult:
        tasks = sort_tomorrow(self.store.filter_by_day(window.tomorrow_key))
        if not tasks:
            raise EmptyPlanError("Add some plans first!")
        start = TOMORROW_START_LABEL
        return self._optimize(
            ActionKind.OPTIMIZE_TOMORROW,
            tasks,
            start,
            success=f"Schedule optimized (Start: {start})!",
            failure="Could not generate schedule. Try again.",
        )

    def optimize_today(self, window: DayWindow, now: datetime) -> OptimizationResult:
        tasks = [
            task
            for task in sort_today(self.store.filter_by_day(window.today_key))
            if not task.is_completed
        ]
        if not tasks:
            raise EmptyPlanError("No unfinished tasks to schedule!")
        start = compute_start_label(now, self.reference_offset_minutes)
        return self._optimize(
            ActionKind.OPTIMIZE_TODAY,
            tasks,
            start,
            success=f"Day scheduled starting {start}!",
            failure="Could not optimize schedule.",
        )

    def _optimize(
        self,
        kind: ActionKind,
        tasks: Sequence[Task],
        start: str,
        success: str,
        failure: str,
    ) -> OptimizationResult:
        items = build_schedule_request(tasks)
        with self._exclusive(kind):
            try:
                raw = self.adapter.generate_schedule(items, start)
            except Exception as e:
                logger.error(f"Error optimizing schedule ({kind.value}): {e}")
                raise ScheduleOptimizationFailed(failure) from None
        try:
            accepted = validate_schedule_response(raw, [item.id for item in items])
        except ScheduleResponseError as e:
            logger.warning(f"Rejected schedule response ({kind.value}): {e}")
            raise ScheduleOptimizationFailed(failure) from None
        self.store.merge_suggested_times(accepted)
        logger.info(f"Merged {len(accepted)} suggested time(s) ({kind.value}, start {start})")
        return OptimizationResult(start_time=start, message=success, scheduled=accepted)
