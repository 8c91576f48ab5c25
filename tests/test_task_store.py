# tests/test_task_store.py

from __future__ import annotations

import math

import pytest

from taskglitch.tasks.task_logic import compute_metrics
from taskglitch.tasks.task_models import TaskPriority, TaskStatus
from taskglitch.tasks.task_store import TaskStore

from .fakes import T0, FakeClock


def test_add_assigns_id_and_created_at(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task(title="Call Acme", revenue=500, time_taken=2)

    assert task.id == "t-1"
    assert task.created_at == T0
    assert task.completed_at is None
    assert task.status is TaskStatus.TODO
    assert task.priority is TaskPriority.MEDIUM
    assert store.tasks == (task,)


def test_add_coerces_non_positive_hours_and_negative_revenue(store: TaskStore) -> None:
    zero = store.add_task(title="zero", time_taken=0)
    negative = store.add_task(title="neg", time_taken=-3, revenue=-10)

    assert zero.time_taken == 1
    assert negative.time_taken == 1
    assert negative.revenue == 0
    assert all(t.time_taken > 0 for t in store.tasks)


def test_add_done_stamps_completed_at(store: TaskStore) -> None:
    task = store.add_task(title="closed deal", status=TaskStatus.DONE)
    assert task.completed_at == T0


def test_add_with_existing_id_is_a_replay(store: TaskStore) -> None:
    first = store.add_task(title="one", task_id="fixed")
    again = store.add_task(title="other title", task_id="fixed")

    assert again == first
    assert store.count_tasks() == 1


def test_update_unknown_id_is_noop(store: TaskStore) -> None:
    store.add_task(title="a")
    before = store.tasks
    store.update_task("missing", {"title": "x"})
    assert store.tasks == before


def test_update_merges_patch_and_coerces_hours(store: TaskStore) -> None:
    task = store.add_task(title="a", time_taken=3)
    store.update_task(task.id, {"title": "b", "time_taken": -1, "priority": "High"})

    updated = store.get_task(task.id)
    assert updated is not None
    assert updated.title == "b"
    assert updated.time_taken == 1
    assert updated.priority is TaskPriority.HIGH
    assert updated.created_at == task.created_at


def test_update_ignores_store_owned_fields(store: TaskStore) -> None:
    task = store.add_task(title="a")
    store.update_task(task.id, {"id": "hijack", "created_at": None, "completed_at": T0, "bogus": 1})

    assert store.get_task(task.id) == task
    assert store.get_task("hijack") is None


def test_completed_at_set_once_and_never_reset(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task(title="deal")

    clock.advance(hours=1)
    store.update_task(task.id, {"status": TaskStatus.DONE})
    done = store.get_task(task.id)
    assert done is not None
    first_completion = done.completed_at
    assert first_completion == T0.replace(hour=13)

    clock.advance(hours=1)
    store.update_task(task.id, {"status": TaskStatus.TODO})
    reopened = store.get_task(task.id)
    assert reopened is not None
    assert reopened.completed_at == first_completion

    clock.advance(hours=1)
    store.update_task(task.id, {"status": TaskStatus.DONE})
    store.update_task(task.id, {"title": "renamed"})
    final = store.get_task(task.id)
    assert final is not None
    assert final.status is TaskStatus.DONE
    assert final.completed_at == first_completion


def test_done_to_done_update_keeps_completed_at(store: TaskStore, clock: FakeClock) -> None:
    task = store.add_task(title="deal", status=TaskStatus.DONE)
    clock.advance(days=1)
    store.update_task(task.id, {"status": TaskStatus.DONE, "revenue": 10})

    updated = store.get_task(task.id)
    assert updated is not None
    assert updated.completed_at == T0


def test_delete_then_undo_restores_equal_record(store: TaskStore) -> None:
    a = store.add_task(title="a", revenue=100, time_taken=2)
    b = store.add_task(title="b")

    store.delete_task(a.id)
    assert store.get_task(a.id) is None
    assert store.last_deleted == a

    store.undo_delete()
    assert store.last_deleted is None
    # reinserted at the end, not at the original index
    assert store.tasks == (b, a)


def test_second_delete_discards_first(store: TaskStore) -> None:
    a = store.add_task(title="a")
    b = store.add_task(title="b")

    store.delete_task(a.id)
    store.delete_task(b.id)
    store.undo_delete()

    assert store.tasks == (b,)
    assert store.last_deleted is None
    store.undo_delete()
    assert store.tasks == (b,)


def test_delete_unknown_keeps_undo_slot(store: TaskStore) -> None:
    a = store.add_task(title="a")
    store.delete_task(a.id)
    store.delete_task("missing")
    assert store.last_deleted == a


def test_clear_last_deleted_does_not_reinsert(store: TaskStore) -> None:
    a = store.add_task(title="a")
    store.delete_task(a.id)
    store.clear_last_deleted()

    assert store.last_deleted is None
    assert store.tasks == ()
    store.undo_delete()
    assert store.tasks == ()


def test_undo_skips_when_id_is_live_again(store: TaskStore) -> None:
    a = store.add_task(title="a", task_id="same")
    store.delete_task(a.id)
    store.add_task(title="replayed", task_id="same")

    store.undo_delete()

    assert [t.title for t in store.tasks] == ["replayed"]
    assert store.last_deleted is None


def test_listeners_notified_on_changes_only(store: TaskStore) -> None:
    calls: list[int] = []
    store.subscribe(lambda: calls.append(store.count_tasks()))

    a = store.add_task(title="a")
    store.update_task("missing", {"title": "x"})
    store.delete_task("missing")
    store.undo_delete()  # empty slot
    store.delete_task(a.id)
    store.undo_delete()

    assert calls == [1, 0, 1]


def test_replace_all_hydrates_and_clears_undo(store: TaskStore) -> None:
    a = store.add_task(title="a")
    store.delete_task(a.id)

    other = TaskStore(clock=FakeClock())
    loaded = [other.add_task(title="x", task_id="x"), other.add_task(title="y", task_id="y")]
    store.replace_all(loaded)

    assert store.tasks == tuple(loaded)
    assert store.last_deleted is None


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan"), "inf", "nan"])
def test_non_finite_numbers_are_sanitized(store: TaskStore, bad: object) -> None:
    task = store.add_task(title="x", revenue=bad, time_taken=bad)

    assert task.time_taken == 1
    assert task.revenue == 0

    metrics = compute_metrics(store.tasks)
    assert math.isfinite(metrics.average_roi)
    assert math.isfinite(metrics.revenue_per_hour)
    assert math.isfinite(metrics.time_efficiency_pct)


def test_update_with_non_finite_numbers_is_sanitized(store: TaskStore) -> None:
    task = store.add_task(title="x", revenue=100, time_taken=4)

    store.update_task(task.id, {"time_taken": float("nan"), "revenue": float("inf")})

    updated = store.get_task(task.id)
    assert updated is not None
    assert updated.time_taken == 1
    assert updated.revenue == 0


@pytest.mark.parametrize(
    "patch",
    [{"status": "bogus"}, {"status": None}, {"priority": "urgent"}, {"priority": ""}],
)
def test_unknown_labels_in_update_keep_current_values(store: TaskStore, patch: dict) -> None:
    task = store.add_task(title="x", status=TaskStatus.DONE, priority=TaskPriority.HIGH)

    store.update_task(task.id, patch)

    updated = store.get_task(task.id)
    assert updated is not None
    assert updated.status is TaskStatus.DONE
    assert updated.priority is TaskPriority.HIGH
    assert updated.completed_at == T0


def test_update_accepts_known_labels_loosely(store: TaskStore) -> None:
    task = store.add_task(title="x")

    store.update_task(task.id, {"status": "in_progress", "priority": "low"})

    updated = store.get_task(task.id)
    assert updated is not None
    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.priority is TaskPriority.LOW
