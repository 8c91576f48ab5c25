# src/taskglitch/tasks/task_seed.py

"""Deterministic sample sales tasks, used when no real data can be loaded."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from .task_models import Task, TaskPriority, TaskStatus

DEFAULT_SEED_COUNT = 50
DEFAULT_SEED = 42

# Fixed reference time so the same seed always yields the same dataset.
SEED_EPOCH = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

_ACTIONS = (
    "Follow up with",
    "Prepare proposal for",
    "Demo product to",
    "Negotiate renewal with",
    "Qualify lead from",
    "Send quote to",
    "Onboard",
    "Upsell analytics to",
)

_ACCOUNTS = (
    "Acme Corp",
    "Globex",
    "Initech",
    "Umbrella Retail",
    "Stark Logistics",
    "Wayne Foods",
    "Hooli",
    "Vandelay Imports",
    "Soylent Health",
    "Wonka Industries",
)

_STATUS_WEIGHTS = ((TaskStatus.TODO, 4), (TaskStatus.IN_PROGRESS, 3), (TaskStatus.DONE, 3))
_PRIORITY_WEIGHTS = ((TaskPriority.HIGH, 3), (TaskPriority.MEDIUM, 4), (TaskPriority.LOW, 3))


def _weighted(rng: random.Random, options):
    values = [v for v, _ in options]
    weights = [w for _, w in options]
    return rng.choices(values, weights=weights, k=1)[0]


def generate_sales_tasks(
    count: int = DEFAULT_SEED_COUNT,
    *,
    seed: int = DEFAULT_SEED,
    now: datetime = SEED_EPOCH,
) -> list[Task]:
    """Generate `count` tasks. Same (count, seed, now) always gives the same list."""
    rng = random.Random(seed)
    out: list[Task] = []
    for i in range(max(0, int(count))):
        status = _weighted(rng, _STATUS_WEIGHTS)
        priority = _weighted(rng, _PRIORITY_WEIGHTS)
        created_at = now - timedelta(days=rng.randint(1, 60), hours=rng.randint(0, 8))
        time_taken = rng.randint(1, 40) / 2  # 0.5h steps, always > 0
        completed_at = None
        if status is TaskStatus.DONE:
            completed_at = created_at + timedelta(hours=time_taken + rng.randint(0, 72))

        out.append(
            Task(
                id=f"seed-{i + 1:03d}",
                title=f"{rng.choice(_ACTIONS)} {rng.choice(_ACCOUNTS)}",
                status=status,
                priority=priority,
                revenue=float(rng.randrange(0, 20_000, 50)),
                time_taken=time_taken,
                created_at=created_at,
                completed_at=completed_at,
            )
        )
    return out
