# src/taskglitch/tasks/task_logic.py

"""
Pure formulas over tasks.

- with_derived: per-task ROI and priority weight
- sort_tasks: stable ranking (ROI desc, then priority weight desc)
- compute_*: aggregate metrics over any task subset

Every function accepts Task or DerivedTask and never raises on empty input.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from .task_models import DerivedTask, Metrics, Task, TaskPriority, TaskStatus

GRADE_EXCELLENT = "Excellent"
GRADE_GOOD = "Good"
GRADE_NEEDS_IMPROVEMENT = "Needs Improvement"

# average ROI (revenue per hour) thresholds
EXCELLENT_ROI_THRESHOLD = 500.0  # strictly above
GOOD_ROI_THRESHOLD = 200.0  # at or above

EMPTY_METRICS = Metrics(
    total_revenue=0.0,
    total_time_taken=0.0,
    time_efficiency_pct=0.0,
    revenue_per_hour=0.0,
    average_roi=0.0,
    performance_grade=GRADE_NEEDS_IMPROVEMENT,
)


class TaskLike(Protocol):
    @property
    def status(self) -> TaskStatus: ...
    @property
    def priority(self) -> TaskPriority: ...
    @property
    def revenue(self) -> float: ...
    @property
    def time_taken(self) -> float: ...


def compute_roi(task: TaskLike) -> float:
    # time_taken > 0 is a store invariant
    return task.revenue / task.time_taken


def with_derived(task: Task) -> DerivedTask:
    return DerivedTask(
        task=task,
        roi=compute_roi(task),
        priority_weight=task.priority.weight,
    )


def _sort_key(task: DerivedTask) -> tuple[float, int]:
    return (-task.roi, -task.priority_weight)


def sort_tasks(tasks: Iterable[DerivedTask]) -> list[DerivedTask]:
    """ROI descending, then priority weight descending. Ties keep input order."""
    return sorted(tasks, key=_sort_key)


def derive_sorted(tasks: Iterable[Task]) -> list[DerivedTask]:
    return sort_tasks(with_derived(t) for t in tasks)


def compute_total_revenue(tasks: Iterable[TaskLike]) -> float:
    return float(sum(t.revenue for t in tasks))


def compute_total_time_taken(tasks: Iterable[TaskLike]) -> float:
    return float(sum(t.time_taken for t in tasks))


def compute_time_efficiency(tasks: Iterable[TaskLike]) -> float:
    """
    Share of invested hours that went into Done tasks, in percent [0, 100].

    Weighted by hours, not by task count: a Done task with few hours moves
    the figure little, while open tasks with many hours pull it down.
    """
    total_hours = 0.0
    done_hours = 0.0
    for t in tasks:
        total_hours += t.time_taken
        if t.status is TaskStatus.DONE:
            done_hours += t.time_taken
    if total_hours <= 0:
        return 0.0
    return max(0.0, min(100.0, done_hours / total_hours * 100.0))


def compute_revenue_per_hour(tasks: Iterable[TaskLike]) -> float:
    items = list(tasks)
    total_hours = compute_total_time_taken(items)
    if total_hours <= 0:
        return 0.0
    return compute_total_revenue(items) / total_hours


def compute_average_roi(tasks: Iterable[TaskLike]) -> float:
    rois = [compute_roi(t) for t in tasks]
    if not rois:
        return 0.0
    return sum(rois) / len(rois)


def compute_performance_grade(average_roi: float) -> str:
    if average_roi > EXCELLENT_ROI_THRESHOLD:
        return GRADE_EXCELLENT
    if average_roi >= GOOD_ROI_THRESHOLD:
        return GRADE_GOOD
    return GRADE_NEEDS_IMPROVEMENT


def compute_metrics(tasks: Iterable[TaskLike]) -> Metrics:
    items: Sequence[TaskLike] = list(tasks)
    if not items:
        return EMPTY_METRICS
    average_roi = compute_average_roi(items)
    return Metrics(
        total_revenue=compute_total_revenue(items),
        total_time_taken=compute_total_time_taken(items),
        time_efficiency_pct=compute_time_efficiency(items),
        revenue_per_hour=compute_revenue_per_hour(items),
        average_roi=average_roi,
        performance_grade=compute_performance_grade(average_roi),
    )


def count_by_status(tasks: Iterable[TaskLike]) -> dict[TaskStatus, int]:
    counts = {status: 0 for status in TaskStatus}
    for t in tasks:
        counts[t.status] += 1
    return counts


def revenue_by_priority(tasks: Iterable[TaskLike]) -> dict[TaskPriority, float]:
    totals = {priority: 0.0 for priority in TaskPriority}
    for t in tasks:
        totals[t.priority] += t.revenue
    return totals
