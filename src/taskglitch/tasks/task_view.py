# src/taskglitch/tasks/task_view.py

"""
Store-to-view pipeline.

TaskView subscribes to a TaskStore and keeps two derived values current:
the derived+sorted task list and the aggregate metrics over the whole
collection. Filtering is applied on top of the sorted list and never touches
the store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.ports import TaskRepo
from .task_logic import compute_metrics, derive_sorted
from .task_models import DerivedTask, Metrics, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

ALL = "All"


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """Title substring (case-insensitive), status and priority; ALL disables a dimension."""

    query: str = ""
    status: TaskStatus | str = ALL
    priority: TaskPriority | str = ALL

    @property
    def is_active(self) -> bool:
        return bool(self.query) or self.status != ALL or self.priority != ALL

    def matches(self, task: DerivedTask) -> bool:
        if self.query and self.query.lower() not in task.title.lower():
            return False
        if self.status != ALL and task.status != self.status:
            return False
        if self.priority != ALL and task.priority != self.priority:
            return False
        return True


NO_FILTER = TaskFilter()


def filter_tasks(tasks: Iterable[DerivedTask], task_filter: TaskFilter) -> list[DerivedTask]:
    return [t for t in tasks if task_filter.matches(t)]


class TaskView:
    """Recomputes derived tasks and metrics whenever the store changes."""

    def __init__(self, store: TaskRepo) -> None:
        self._store = store
        self._derived_sorted: tuple[DerivedTask, ...] = ()
        self._metrics: Metrics = compute_metrics(())
        self.refresh()
        store.subscribe(self.refresh)

    def refresh(self) -> None:
        tasks = self._store.tasks
        self._derived_sorted = tuple(derive_sorted(tasks))
        self._metrics = compute_metrics(tasks)
        logger.debug("View refreshed: %d tasks", len(self._derived_sorted))

    @property
    def derived_sorted(self) -> tuple[DerivedTask, ...]:
        return self._derived_sorted

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    def filtered(self, task_filter: TaskFilter = NO_FILTER) -> list[DerivedTask]:
        return filter_tasks(self._derived_sorted, task_filter)

    def filtered_metrics(self, task_filter: TaskFilter = NO_FILTER) -> Metrics:
        if not task_filter.is_active:
            return self._metrics
        return compute_metrics(self.filtered(task_filter))
