# src/taskglitch/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from ..core.ports import Clock, IdFactory, StoreListener, random_task_id, utc_now
from .task_models import (
    Task,
    TaskPriority,
    TaskStatus,
    sanitize_revenue,
    sanitize_time_taken,
)

logger = logging.getLogger(__name__)

# Fields a patch may change. id/created_at/completed_at are owned by the store.
PATCHABLE_FIELDS = frozenset({"title", "status", "priority", "revenue", "time_taken"})


class TaskStore:
    """
    In-memory task store with a single-slot undo for deletes.

    Rules enforced here:
    - time_taken is always > 0 (anything <= 0 becomes 1)
    - revenue is never negative
    - ids are unique in the live collection
    - completed_at is stamped once, on the first transition into Done,
      and never cleared

    Mutations never raise: bad input is sanitized, unknown ids are no-ops.

    Thread-safety:
    - every mutation runs under one re-entrant lock
    - listeners are called after the lock is released
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        clock: Clock = utc_now,
        id_factory: IdFactory = random_task_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._last_deleted: Task | None = None
        self._listeners: list[StoreListener] = []
        self._load(tasks)

    # ---- low-level helpers ----

    def _load(self, tasks: Iterable[Task]) -> None:
        seen: set[str] = set()
        for t in tasks:
            if t.id in seen:
                logger.warning("Duplicate task id=%s ignored on load.", t.id)
                continue
            seen.add(t.id)
            if t.time_taken <= 0:
                t = replace(t, time_taken=sanitize_time_taken(t.time_taken))
            self._tasks.append(t)

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    def _new_id(self) -> str:
        task_id = self._id_factory()
        while self._index_of(task_id) >= 0:
            logger.debug("Generated id collided (%s); drawing another.", task_id)
            task_id = self._id_factory()
        return task_id

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Store listener failed.")

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        with self._lock:
            return tuple(self._tasks)

    @property
    def last_deleted(self) -> Task | None:
        return self._last_deleted

    def get_task(self, task_id: str) -> Task | None:
        with self._lock:
            i = self._index_of(task_id)
            return self._tasks[i] if i >= 0 else None

    def count_tasks(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    # ---- mutations ----

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a freshly loaded collection. Clears the undo slot."""
        with self._lock:
            self._tasks = []
            self._last_deleted = None
            self._load(tasks)
            total = len(self._tasks)
        logger.info("TaskStore hydrated total=%s", total)
        self._notify()

    def add_task(
        self,
        *,
        title: str,
        status: TaskStatus | str = TaskStatus.TODO,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        revenue: float = 0.0,
        time_taken: float = 1.0,
        task_id: str | None = None,
    ) -> Task:
        """
        Append a new task and return it.

        A caller-supplied task_id that is already live is treated as a replay:
        the existing record is returned and nothing changes.
        """
        with self._lock:
            if task_id is not None:
                existing = self.get_task(task_id)
                if existing is not None:
                    logger.debug("Task add replay id=%s ignored.", task_id)
                    return existing

            now = self._clock()
            status = TaskStatus.parse(status)
            task = Task(
                id=task_id if task_id is not None else self._new_id(),
                title=str(title or ""),
                status=status,
                priority=TaskPriority.parse(priority),
                revenue=sanitize_revenue(revenue),
                time_taken=sanitize_time_taken(time_taken),
                created_at=now,
                completed_at=now if status is TaskStatus.DONE else None,
            )
            self._tasks.append(task)

        logger.debug(
            "Task added id=%s status=%s priority=%s hours=%s",
            task.id,
            task.status.value,
            task.priority.value,
            task.time_taken,
        )
        self._notify()
        return task

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> None:
        with self._lock:
            i = self._index_of(task_id)
            if i < 0:
                logger.debug("Task update for unknown id=%s ignored.", task_id)
                return

            prev = self._tasks[i]
            changes: dict[str, Any] = {}
            for key, value in patch.items():
                if key not in PATCHABLE_FIELDS:
                    logger.debug("Task update id=%s: field %r is not patchable.", task_id, key)
                    continue
                if key in ("status", "priority"):
                    enum_cls = TaskStatus if key == "status" else TaskPriority
                    parsed = enum_cls.lookup(value)
                    if parsed is None:
                        # Unknown label: keep the current value.
                        logger.debug("Task update id=%s: %s=%r not recognized.", task_id, key, value)
                        continue
                    value = parsed
                elif key == "revenue":
                    value = sanitize_revenue(value)
                elif key == "title":
                    value = str(value or "")
                changes[key] = value

            if "time_taken" in changes:
                changes["time_taken"] = sanitize_time_taken(changes["time_taken"])

            nxt = replace(prev, **changes)
            if (
                not prev.is_done
                and nxt.is_done
                and prev.completed_at is None
            ):
                nxt = replace(nxt, completed_at=self._clock())

            self._tasks[i] = nxt

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        self._notify()

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            i = self._index_of(task_id)
            if i < 0:
                logger.debug("Task delete for unknown id=%s ignored.", task_id)
                return
            # Tasks are frozen, so the removed record doubles as its own copy.
            self._last_deleted = self._tasks.pop(i)

        logger.debug("Task deleted id=%s (undo available)", task_id)
        self._notify()

    def undo_delete(self) -> None:
        with self._lock:
            task = self._last_deleted
            if task is None:
                return
            self._last_deleted = None
            if self._index_of(task.id) >= 0:
                logger.warning("Undo skipped: id=%s is live again.", task.id)
            else:
                self._tasks.append(task)
                logger.debug("Task restored id=%s", task.id)

        self._notify()

    def clear_last_deleted(self) -> None:
        with self._lock:
            if self._last_deleted is None:
                return
            logger.debug("Undo slot cleared (id=%s).", self._last_deleted.id)
            self._last_deleted = None

        self._notify()
