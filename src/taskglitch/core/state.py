# src/taskglitch/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..tasks.activity import ActivityLog
from ..tasks.task_store import TaskStore
from ..tasks.task_view import NO_FILTER, TaskFilter, TaskView


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Read-only context for the greeting. Nothing is enforced with it."""

    name: str
    email: str = ""

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    store: TaskStore
    view: TaskView
    activity: ActivityLog
    user: UserProfile

    task_filter: TaskFilter = NO_FILTER
    load_error: str | None = None

    # Serializes store mutation + activity entry as one step.
    lock: threading.RLock = field(default_factory=threading.RLock)
