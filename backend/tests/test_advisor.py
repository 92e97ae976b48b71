import threading
from datetime import datetime, timedelta, timezone

import pytest

from tomorrow_architect.advisor.adapter import AdvisorAdapter
from tomorrow_architect.advisor.gemini_adapter import GeminiAdvisorAdapter
from tomorrow_architect.advisor.openai_adapter import OpenAIAdvisorAdapter
from tomorrow_architect.advisor.prompts import build_review_prompt, build_schedule_prompt
from tomorrow_architect.core.errors import (
    AdvisorBusyError,
    EmptyPlanError,
    ScheduleOptimizationFailed,
)
from tomorrow_architect.models.task import TaskPriority
from tomorrow_architect.services.advisor import (
    EMPTY_REVIEW_MESSAGE,
    REVIEW_UNAVAILABLE_MESSAGE,
    ActionKind,
    AdvisorService,
)
from tomorrow_architect.services.day_window import resolve_day_window
from tomorrow_architect.services.scheduling import ScheduleItem
from tomorrow_architect.services.task_store import TaskStore

SHANGHAI = timezone(timedelta(hours=8))
NOW = datetime(2025, 12, 16, 10, 7, tzinfo=SHANGHAI)
WINDOW = resolve_day_window(NOW)


class FakeAdvisor(AdvisorAdapter):
    def __init__(self, schedule=None, review="Looks good.", error=None):
        self.schedule = schedule
        self.review = review
        self.error = error
        self.calls = []

    def review_plans(self, tasks):
        self.calls.append(("review", [task.id for task in tasks]))
        if self.error:
            raise self.error
        return self.review

    def generate_schedule(self, items, start_time):
        self.calls.append(("schedule", [item.id for item in items], start_time))
        if self.error:
            raise self.error
        if callable(self.schedule):
            return self.schedule(items)
        return self.schedule


@pytest.fixture()
def store():
    return TaskStore()


def _snapshot(store):
    return [task.model_dump() for task in store.all()]


def test_review_with_no_tasks_skips_the_advisor(store):
    adapter = FakeAdvisor()
    result = AdvisorService(adapter, store).review_tomorrow(WINDOW)
    assert result.text == EMPTY_REVIEW_MESSAGE
    assert adapter.calls == []


def test_review_sends_tomorrow_in_display_order(store):
    low = store.add("Low", WINDOW.tomorrow_key, priority=TaskPriority.LOW)
    high = store.add("High", WINDOW.tomorrow_key, priority=TaskPriority.HIGH)
    store.add("Today", WINDOW.today_key)
    adapter = FakeAdvisor(review="  Nice plan.  ")

    result = AdvisorService(adapter, store).review_tomorrow(WINDOW)

    assert result.text == "Nice plan."
    assert adapter.calls == [("review", [high.id, low.id])]


def test_review_failure_returns_friendly_fallback(store):
    store.add("Plan", WINDOW.tomorrow_key)
    adapter = FakeAdvisor(error=TimeoutError("read timed out"))
    result = AdvisorService(adapter, store).review_tomorrow(WINDOW)
    assert result.text == REVIEW_UNAVAILABLE_MESSAGE
    assert result.fallback is True


def test_optimize_tomorrow_starts_at_work_start_and_merges(store):
    first = store.add("First", WINDOW.tomorrow_key)
    second = store.add("Second", WINDOW.tomorrow_key)
    adapter = FakeAdvisor(
        schedule=[
            {"id": first.id, "suggestedTime": "09:30"},
            {"id": second.id, "suggestedTime": "12:20"},
            {"id": "stranger", "suggestedTime": "10:00"},
        ]
    )

    result = AdvisorService(adapter, store).optimize_tomorrow(WINDOW)

    assert adapter.calls[0][2] == "09:30"
    assert result.start_time == "09:30"
    assert result.message == "Schedule optimized (Start: 09:30)!"
    assert result.scheduled == {first.id: "09:30", second.id: "13:30"}
    assert store.get(second.id).suggested_time == "13:30"


def test_optimize_today_sends_only_unfinished_from_next_quarter(store):
    done = store.add("Done", WINDOW.today_key)
    store.toggle(done.id)
    open_task = store.add("Open", WINDOW.today_key)
    adapter = FakeAdvisor(schedule=lambda items: [{"id": i.id, "suggestedTime": "10:15"} for i in items])

    result = AdvisorService(adapter, store).optimize_today(WINDOW, NOW)

    assert adapter.calls == [("schedule", [open_task.id], "10:15")]
    assert result.message == "Day scheduled starting 10:15!"
    assert store.get(done.id).suggested_time is None


def test_empty_plans_are_rejected_before_calling(store):
    adapter = FakeAdvisor()
    service = AdvisorService(adapter, store)
    with pytest.raises(EmptyPlanError):
        service.optimize_tomorrow(WINDOW)
    done = store.add("Done", WINDOW.today_key)
    store.toggle(done.id)
    with pytest.raises(EmptyPlanError):
        service.optimize_today(WINDOW, NOW)
    assert adapter.calls == []


@pytest.mark.parametrize(
    "adapter",
    [
        FakeAdvisor(error=ConnectionError("socket closed: secret detail")),
        FakeAdvisor(schedule=[]),
        FakeAdvisor(schedule="garbage"),
        FakeAdvisor(schedule=[{"id": "nobody", "suggestedTime": "10:00"}]),
    ],
)
def test_failed_optimization_leaves_store_untouched(store, adapter):
    task = store.add("Plan", WINDOW.tomorrow_key)
    store.merge_suggested_times({task.id: "16:00"})
    before = _snapshot(store)

    with pytest.raises(ScheduleOptimizationFailed) as excinfo:
        AdvisorService(adapter, store).optimize_tomorrow(WINDOW)

    assert str(excinfo.value) == "Could not generate schedule. Try again."
    assert excinfo.value.__cause__ is None
    assert _snapshot(store) == before


def test_second_request_of_same_kind_is_rejected_while_in_flight(store):
    store.add("Plan", WINDOW.tomorrow_key)
    store.add("Now", WINDOW.today_key)
    entered = threading.Event()
    release = threading.Event()

    def slow(items):
        entered.set()
        release.wait(timeout=5)
        return [{"id": item.id, "suggestedTime": "10:00"} for item in items]

    adapter = FakeAdvisor(schedule=slow)
    service = AdvisorService(adapter, store)
    worker = threading.Thread(target=service.optimize_tomorrow, args=(WINDOW,))
    worker.start()
    try:
        assert entered.wait(timeout=5)
        assert service.is_busy(ActionKind.OPTIMIZE_TOMORROW)
        with pytest.raises(AdvisorBusyError):
            service.optimize_tomorrow(WINDOW)
    finally:
        release.set()
        worker.join(timeout=5)
    assert not service.is_busy(ActionKind.OPTIMIZE_TOMORROW)


def test_unconfigured_adapters_fall_back_to_local_advice(monkeypatch, make_task):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    items = [
        ScheduleItem(id="a", content="Deep work", priority="high", category="work", duration=180),
        ScheduleItem(id="b", content="Gym", priority="medium", category="personal", duration=60),
    ]
    tasks = [make_task(priority=TaskPriority.HIGH)]
    for adapter in (GeminiAdvisorAdapter(), OpenAIAdvisorAdapter()):
        assert adapter.generate_schedule(items, "11:00") == [
            {"id": "a", "suggestedTime": "11:00"},
            {"id": "b", "suggestedTime": "15:30"},
        ]
        assert "1 high-priority" in adapter.review_plans(tasks)


def test_prompts_carry_rules_and_tasks(make_task):
    review = build_review_prompt([make_task(content="Ship it", priority=TaskPriority.HIGH)])
    assert "- [HIGH] Ship it" in review
    schedule = build_schedule_prompt(
        [ScheduleItem(id="a", content="Ship it", priority="high", category="work", duration=45)],
        "13:45",
    )
    assert "Start time: 13:45." in schedule
    assert '"duration": 45' in schedule
    assert "Lunch Break: 12:00 to 13:30." in schedule
