# src/taskglitch/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on small capabilities instead of calling datetime.now()
or uuid4() directly. Tests inject deterministic implementations.
"""

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Protocol


class Clock(Protocol):
    """Returns the current time as an aware datetime."""
    def __call__(self) -> datetime: ...


class IdFactory(Protocol):
    """Returns a fresh, unique task id."""
    def __call__(self) -> str: ...


class StoreListener(Protocol):
    """Called after every mutation that changed the store."""
    def __call__(self) -> None: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def random_task_id() -> str:
    return str(uuid.uuid4())


class TaskRepo(Protocol):
    # Read API
    @property
    def tasks(self) -> tuple[Any, ...]: ...
    @property
    def last_deleted(self) -> Any | None: ...
    def get_task(self, task_id: str) -> Any | None: ...
    def count_tasks(self) -> int: ...

    # Mutations
    def add_task(
            self,
            *,
            title: str,
            status: Any = None,  # TaskStatus (kept as Any to avoid import coupling)
            priority: Any = None,  # TaskPriority
            revenue: float = 0.0,
            time_taken: float = 1.0,
            task_id: str | None = None,
    ) -> Any: ...
    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> None: ...
    def delete_task(self, task_id: str) -> None: ...
    def undo_delete(self) -> None: ...
    def clear_last_deleted(self) -> None: ...
    def replace_all(self, tasks: Any) -> None: ...
    def subscribe(self, listener: StoreListener) -> None: ...
