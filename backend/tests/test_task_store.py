import itertools

import pytest

from tomorrow_architect.core.errors import TaskValidationError
from tomorrow_architect.models.task import TaskCategory, TaskPriority
from tomorrow_architect.services.task_store import TaskStore

TODAY = "2025-12-16"
TOMORROW = "2025-12-17"


@pytest.fixture()
def snapshots():
    return []


@pytest.fixture()
def store(snapshots):
    ids = (f"id-{n}" for n in itertools.count(1))
    return TaskStore(
        on_change=snapshots.append,
        id_factory=lambda: next(ids),
        clock_ms=lambda: 1765800000000,
    )


def test_add_assigns_identity_and_defaults(store, snapshots):
    task = store.add("  Write report  ", TOMORROW, estimated_duration=45)

    assert task.id == "id-1"
    assert task.content == "Write report"
    assert task.is_completed is False
    assert task.target_date == TOMORROW
    assert task.priority == TaskPriority.MEDIUM
    assert task.category == TaskCategory.PERSONAL
    assert task.created_at == 1765800000000
    assert task.estimated_duration == 45
    assert task.suggested_time is None
    assert len(snapshots) == 1


@pytest.mark.parametrize("content", ["", "   ", None])
def test_add_rejects_empty_content(store, snapshots, content):
    with pytest.raises(TaskValidationError):
        store.add(content, TODAY)
    assert store.all() == []
    assert snapshots == []


def test_add_rejects_non_positive_duration(store):
    with pytest.raises(TaskValidationError):
        store.add("Stretch", TODAY, estimated_duration=0)
    assert len(store) == 0


def test_add_skips_colliding_ids():
    ids = iter(["dup", "dup", "fresh"])
    store = TaskStore(id_factory=lambda: next(ids))
    first = store.add("One", TODAY)
    second = store.add("Two", TODAY)
    assert (first.id, second.id) == ("dup", "fresh")


def test_toggle_flips_completion(store):
    task = store.add("Email", TODAY)
    assert store.toggle(task.id).is_completed is True
    assert store.toggle(task.id).is_completed is False


def test_toggle_and_delete_missing_id_leave_store_unchanged(store, snapshots):
    store.add("Email", TODAY)
    before = store.all()
    snapshots.clear()

    assert store.toggle("missing") is None
    assert store.delete("missing") is False
    assert store.all() == before
    assert snapshots == []


def test_delete_removes_task(store):
    keep = store.add("Keep", TODAY)
    drop = store.add("Drop", TODAY)
    assert store.delete(drop.id) is True
    assert [task.id for task in store.all()] == [keep.id]


def test_move_to_day_clears_suggested_times(store):
    done = store.add("Done", TODAY)
    open_a = store.add("Open A", TODAY)
    open_b = store.add("Open B", TODAY)
    store.toggle(done.id)
    store.merge_suggested_times({done.id: "09:30", open_a.id: "10:00", open_b.id: "11:00"})

    unfinished = [task.id for task in store.unfinished(TODAY)]
    assert store.move_to_day(unfinished, TOMORROW) == 2

    moved = store.filter_by_day(TOMORROW)
    assert {task.id for task in moved} == {open_a.id, open_b.id}
    assert all(task.suggested_time is None for task in moved)
    untouched = store.get(done.id)
    assert untouched.target_date == TODAY
    assert untouched.suggested_time == "09:30"


def test_merge_only_touches_listed_ids(store):
    first = store.add("First", TOMORROW)
    second = store.add("Second", TOMORROW)
    store.merge_suggested_times({second.id: "14:00"})
    store.merge_suggested_times({first.id: "09:30", "unknown": "10:00"})

    assert store.get(first.id).suggested_time == "09:30"
    assert store.get(second.id).suggested_time == "14:00"
    assert len(store) == 2


def test_filter_by_day_preserves_insertion_order(store):
    ids = [store.add(f"Task {n}", TOMORROW if n % 2 else TODAY).id for n in range(6)]
    assert [task.id for task in store.filter_by_day(TOMORROW)] == ids[1::2]
    assert [task.id for task in store.filter_by_day(TODAY)] == ids[0::2]


def test_replace_all_normalizes_categories(store, snapshots):
    count = store.replace_all(
        [
            {"id": "a", "content": "Legacy", "targetDate": TODAY, "priority": "high"},
            {"id": "b", "content": "Odd", "targetDate": TODAY, "category": "chores"},
            {"id": "c", "content": "Work", "targetDate": TODAY, "category": "work"},
        ]
    )

    assert count == 3
    categories = [task.category for task in store.all()]
    assert categories == [TaskCategory.PERSONAL, TaskCategory.PERSONAL, TaskCategory.WORK]
    assert len(snapshots[-1]) == 3


def test_returned_tasks_are_copies(store):
    task = store.add("Original", TODAY)
    task.content = "Changed outside"
    store.filter_by_day(TODAY)[0].is_completed = True

    stored = store.get(task.id)
    assert stored.content == "Original"
    assert stored.is_completed is False
