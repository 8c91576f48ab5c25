# src/taskglitch/tasks/task_api.py

"""
User-facing mutation actions.

Each helper applies one store operation and, when it actually changed
something, records one activity entry. No-ops (unknown id, empty undo slot)
are silent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..core.state import AppState
from .activity import ActivityKind
from .task_models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


def add_task(
    state: AppState,
    *,
    title: str,
    status: TaskStatus | str = TaskStatus.TODO,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
    revenue: float = 0.0,
    time_taken: float = 1.0,
    task_id: str | None = None,
) -> Task:
    with state.lock:
        replay = task_id is not None and state.store.get_task(task_id) is not None
        task = state.store.add_task(
            title=title,
            status=status,
            priority=priority,
            revenue=revenue,
            time_taken=time_taken,
            task_id=task_id,
        )
        if not replay:
            state.activity.record(ActivityKind.ADD, f"Added task: {task.title}")
        return task


def update_task(state: AppState, task_id: str, patch: Mapping[str, Any]) -> bool:
    """Returns False when the id is unknown (nothing changed, nothing logged)."""
    with state.lock:
        if state.store.get_task(task_id) is None:
            return False
        state.store.update_task(task_id, patch)
        state.activity.record(ActivityKind.UPDATE, f"Updated task: {task_id}")
        return True


def delete_task(state: AppState, task_id: str) -> Task | None:
    """Returns the removed task (now held in the undo slot), or None."""
    with state.lock:
        if state.store.get_task(task_id) is None:
            return None
        state.store.delete_task(task_id)
        deleted = state.store.last_deleted
        state.activity.record(ActivityKind.DELETE, f"Deleted task: {task_id}")
        return deleted


def undo_delete(state: AppState) -> Task | None:
    """Returns the restored task, or None when the undo slot was empty."""
    with state.lock:
        pending = state.store.last_deleted
        if pending is None:
            return None
        state.store.undo_delete()
        state.activity.record(ActivityKind.UNDO, "Undo delete")
        return pending


def dismiss_undo(state: AppState) -> None:
    with state.lock:
        state.store.clear_last_deleted()
