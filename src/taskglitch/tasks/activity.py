# src/taskglitch/tasks/activity.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..core.ports import Clock, IdFactory, random_task_id, utc_now

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_LIMIT = 50


class ActivityKind(StrEnum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    UNDO = "undo"


@dataclass(frozen=True, slots=True)
class ActivityEntry:
    id: str
    ts: datetime
    kind: ActivityKind
    summary: str


class ActivityLog:
    """Newest-first list of mutation entries, capped at `limit`."""

    def __init__(
        self,
        *,
        limit: int = DEFAULT_ACTIVITY_LIMIT,
        clock: Clock = utc_now,
        id_factory: IdFactory = random_task_id,
    ) -> None:
        self._limit = max(1, int(limit))
        self._clock = clock
        self._id_factory = id_factory
        self._entries: list[ActivityEntry] = []

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def entries(self) -> tuple[ActivityEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, kind: ActivityKind, summary: str) -> ActivityEntry:
        entry = ActivityEntry(
            id=self._id_factory(),
            ts=self._clock(),
            kind=ActivityKind(kind),
            summary=summary,
        )
        self._entries = [entry, *self._entries][: self._limit]
        logger.info("Activity %s: %s", entry.kind.value, summary)
        return entry
