# tests/test_task_logic.py

from __future__ import annotations

from dataclasses import replace

import pytest

from taskglitch.tasks.task_logic import (
    EMPTY_METRICS,
    GRADE_EXCELLENT,
    GRADE_GOOD,
    GRADE_NEEDS_IMPROVEMENT,
    compute_average_roi,
    compute_metrics,
    compute_performance_grade,
    compute_revenue_per_hour,
    compute_time_efficiency,
    count_by_status,
    revenue_by_priority,
    sort_tasks,
    with_derived,
)
from taskglitch.tasks.task_models import Task, TaskPriority, TaskStatus

from .fakes import T0


def make_task(
    task_id: str,
    *,
    revenue: float = 0.0,
    time_taken: float = 1.0,
    status: TaskStatus = TaskStatus.TODO,
    priority: TaskPriority = TaskPriority.MEDIUM,
) -> Task:
    return Task(
        id=task_id,
        title=f"task {task_id}",
        status=status,
        priority=priority,
        revenue=revenue,
        time_taken=time_taken,
        created_at=T0,
    )


def test_empty_set_metrics_are_zero_with_default_grade() -> None:
    m = compute_metrics([])
    assert m == EMPTY_METRICS
    assert m.total_revenue == 0
    assert m.total_time_taken == 0
    assert m.revenue_per_hour == 0
    assert m.average_roi == 0
    assert m.time_efficiency_pct == 0
    assert m.performance_grade == GRADE_NEEDS_IMPROVEMENT


def test_two_task_example() -> None:
    tasks = [make_task("a", revenue=100, time_taken=2), make_task("b", revenue=200, time_taken=2)]
    m = compute_metrics(tasks)

    assert m.total_revenue == 300
    assert m.total_time_taken == 4
    assert m.revenue_per_hour == 75
    assert m.average_roi == 75
    assert m.performance_grade == GRADE_NEEDS_IMPROVEMENT


def test_time_efficiency_counts_done_hours_and_stays_bounded() -> None:
    tasks = [
        make_task("a", time_taken=3, status=TaskStatus.DONE),
        make_task("b", time_taken=1, status=TaskStatus.IN_PROGRESS),
    ]
    assert compute_time_efficiency(tasks) == pytest.approx(75.0)
    assert compute_time_efficiency([make_task("c", status=TaskStatus.DONE)]) == 100.0
    assert compute_time_efficiency([make_task("d")]) == 0.0
    assert compute_time_efficiency([]) == 0.0


def test_time_efficiency_weights_hours_not_task_count() -> None:
    # one of four tasks is Done, but it holds 9 of 12 hours
    tasks = [
        make_task("big", time_taken=9, status=TaskStatus.DONE),
        make_task("s1", time_taken=1),
        make_task("s2", time_taken=1),
        make_task("s3", time_taken=1),
    ]
    assert compute_time_efficiency(tasks) == pytest.approx(75.0)


@pytest.mark.parametrize(
    ("roi", "grade"),
    [
        (0.0, GRADE_NEEDS_IMPROVEMENT),
        (199.99, GRADE_NEEDS_IMPROVEMENT),
        (200.0, GRADE_GOOD),
        (500.0, GRADE_GOOD),
        (500.01, GRADE_EXCELLENT),
    ],
)
def test_performance_grade_thresholds(roi: float, grade: str) -> None:
    assert compute_performance_grade(roi) == grade


def test_formulas_accept_derived_tasks() -> None:
    tasks = [make_task("a", revenue=900, time_taken=1), make_task("b", revenue=300, time_taken=3)]
    derived = [with_derived(t) for t in tasks]

    assert compute_average_roi(derived) == compute_average_roi(tasks) == 500
    assert compute_revenue_per_hour(derived) == 300
    assert compute_metrics(derived) == compute_metrics(tasks)


def test_with_derived_is_pure() -> None:
    task = make_task("a", revenue=50, time_taken=4, priority=TaskPriority.HIGH)
    d1 = with_derived(task)
    d2 = with_derived(task)

    assert d1 == d2
    assert d1.roi == 12.5
    assert d1.priority_weight == 3
    assert d1.task is task


def test_sort_by_roi_then_priority() -> None:
    low = with_derived(make_task("low", revenue=10))
    high_prio = with_derived(make_task("hp", revenue=100, priority=TaskPriority.HIGH))
    best = with_derived(make_task("best", revenue=1000))
    same_roi_low_prio = with_derived(make_task("lp", revenue=100, priority=TaskPriority.LOW))

    ordered = sort_tasks([low, same_roi_low_prio, high_prio, best])
    assert [t.id for t in ordered] == ["best", "hp", "lp", "low"]


def test_sort_is_stable_and_does_not_mutate_input() -> None:
    first = with_derived(make_task("first", revenue=100))
    second = with_derived(make_task("second", revenue=100))
    third = with_derived(make_task("third", revenue=100))
    items = [second, first, third]
    snapshot = list(items)

    ordered = sort_tasks(items)

    assert [t.id for t in ordered] == ["second", "first", "third"]
    assert items == snapshot
    assert ordered is not items


def test_breakdowns() -> None:
    tasks = [
        make_task("a", revenue=100, status=TaskStatus.DONE, priority=TaskPriority.HIGH),
        make_task("b", revenue=50, priority=TaskPriority.HIGH),
        replace(make_task("c", revenue=25), priority=TaskPriority.LOW),
    ]
    assert count_by_status(tasks) == {
        TaskStatus.TODO: 2,
        TaskStatus.IN_PROGRESS: 0,
        TaskStatus.DONE: 1,
    }
    assert revenue_by_priority(tasks) == {
        TaskPriority.HIGH: 150.0,
        TaskPriority.MEDIUM: 0.0,
        TaskPriority.LOW: 25.0,
    }
