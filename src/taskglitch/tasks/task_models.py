# src/taskglitch/tasks/task_models.py

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status. Values are the labels used on the wire."""

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def lookup(cls, raw: Any) -> TaskStatus | None:
        """Strict match on the label (case, "_" and "-" ignored); None if unknown."""
        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        text = str(raw).strip().lower().replace("_", " ").replace("-", " ")
        for member in cls:
            if member.value.lower() == text:
                return member
        return None

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        return cls.lookup(raw) or cls.TODO


class TaskPriority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def lookup(cls, raw: Any) -> TaskPriority | None:
        if isinstance(raw, cls):
            return raw
        if not raw:
            return None
        text = str(raw).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return None

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        return cls.lookup(raw) or cls.MEDIUM

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}

DEFAULT_TIME_TAKEN = 1.0


def sanitize_time_taken(value: Any) -> float:
    """Hours must stay positive and finite: anything else becomes 1."""
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return DEFAULT_TIME_TAKEN
    if not math.isfinite(hours) or hours <= 0:
        return DEFAULT_TIME_TAKEN
    return hours


def sanitize_revenue(value: Any) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def parse_timestamp(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        ts = raw
    else:
        try:
            ts = datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def format_timestamp(ts: datetime | None) -> str:
    return ts.isoformat() if ts is not None else ""


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    revenue: float
    time_taken: float  # hours
    created_at: datetime
    completed_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status is TaskStatus.DONE

    @classmethod
    def from_record(cls, record: Mapping[str, Any], *, now: datetime) -> Task:
        """
        Build a Task from a wire record (camelCase keys, ISO timestamps).

        Raises ValueError when the record has no usable id.
        A missing createdAt falls back to `now`.
        """
        raw_id = record.get("id")
        if raw_id is None or str(raw_id).strip() == "":
            raise ValueError("task record has no id")

        status = TaskStatus.parse(record.get("status"))
        completed_at = parse_timestamp(record.get("completedAt"))
        created_at = parse_timestamp(record.get("createdAt")) or now

        return cls(
            id=str(raw_id).strip(),
            title=str(record.get("title") or ""),
            status=status,
            priority=TaskPriority.parse(record.get("priority")),
            revenue=sanitize_revenue(record.get("revenue", 0)),
            time_taken=sanitize_time_taken(record.get("timeTaken", 0)),
            created_at=created_at,
            completed_at=completed_at,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "revenue": self.revenue,
            "timeTaken": self.time_taken,
            "createdAt": format_timestamp(self.created_at),
            "completedAt": format_timestamp(self.completed_at),
        }


RECORD_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "status",
    "priority",
    "revenue",
    "timeTaken",
    "createdAt",
    "completedAt",
)


@dataclass(frozen=True, slots=True)
class DerivedTask:
    """A Task plus values computed from it. Never stored."""

    task: Task
    roi: float
    priority_weight: int

    # Pass-through accessors so formulas and filters accept Task or DerivedTask.
    @property
    def id(self) -> str:
        return self.task.id

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def status(self) -> TaskStatus:
        return self.task.status

    @property
    def priority(self) -> TaskPriority:
        return self.task.priority

    @property
    def revenue(self) -> float:
        return self.task.revenue

    @property
    def time_taken(self) -> float:
        return self.task.time_taken

    @property
    def created_at(self) -> datetime:
        return self.task.created_at

    @property
    def completed_at(self) -> datetime | None:
        return self.task.completed_at

    def to_record(self) -> dict[str, Any]:
        return self.task.to_record()


@dataclass(frozen=True, slots=True)
class Metrics:
    total_revenue: float
    total_time_taken: float
    time_efficiency_pct: float
    revenue_per_hour: float
    average_roi: float
    performance_grade: str
