# src/taskglitch/tasks/task_loader.py

from __future__ import annotations

"""
Initial task loader.

The source is either an http(s) URL or a local JSON file. Only a non-empty
JSON array counts as real data; anything else (non-2xx, missing file,
non-array body, empty array) falls back to generated sample tasks.

Errors (network, bad JSON) are reported in LoadResult.error, and the
collection is still populated from the fallback generator.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from ..core.ports import Clock, utc_now
from .task_models import Task
from .task_seed import DEFAULT_SEED, DEFAULT_SEED_COUNT, generate_sales_tasks

logger = logging.getLogger(__name__)

DEFAULT_LOAD_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class LoadResult:
    tasks: list[Task] = field(default_factory=list)
    error: str | None = None
    used_fallback: bool = False


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _fetch_url(
    url: str,
    *,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    timeout_obj = httpx.Timeout(timeout, connect=min(timeout, 5.0))
    async with httpx.AsyncClient(timeout=timeout_obj, transport=transport) as client:
        res = await client.get(url)
        if not res.is_success:
            logger.warning("Task source %s answered HTTP %s; treating as empty.", url, res.status_code)
            return []
        return res.json()


async def _read_file(path: Path) -> Any:
    if not path.exists():
        logger.info("Task source %s does not exist; treating as empty.", path)
        return []
    raw = await asyncio.to_thread(path.read_text, "utf-8")
    return json.loads(raw)


async def fetch_task_records(
    source: str | Path,
    *,
    timeout: float = DEFAULT_LOAD_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Return the decoded JSON body of the source. Raises on network/parse errors."""
    src = str(source)
    if _is_url(src):
        return await _fetch_url(src, timeout=timeout, transport=transport)
    return await _read_file(Path(src).expanduser())


def parse_task_records(data: Any, *, now) -> list[Task]:
    """Turn a decoded JSON body into Tasks. Non-arrays give []; bad records are skipped."""
    if not isinstance(data, list):
        if data:
            logger.warning("Task source returned %s, expected a list.", type(data).__name__)
        return []

    out: list[Task] = []
    seen: set[str] = set()
    for i, record in enumerate(data):
        if not isinstance(record, dict):
            logger.warning("Skipping task record #%d: not an object.", i)
            continue
        try:
            task = Task.from_record(record, now=now)
        except ValueError as e:
            logger.warning("Skipping task record #%d: %s", i, e)
            continue
        if task.id in seen:
            logger.warning("Skipping task record #%d: duplicate id=%s", i, task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out


def _error_message(exc: BaseException) -> str:
    text = str(exc).strip()
    return text or "Failed to load tasks"


async def load_initial_tasks(
    source: str | Path,
    *,
    fallback_count: int = DEFAULT_SEED_COUNT,
    fallback_seed: int = DEFAULT_SEED,
    timeout: float = DEFAULT_LOAD_TIMEOUT_SECONDS,
    clock: Clock = utc_now,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LoadResult:
    error: str | None = None
    tasks: list[Task] = []

    try:
        data = await fetch_task_records(source, timeout=timeout, transport=transport)
        tasks = parse_task_records(data, now=clock())
    except Exception as e:
        # Best-effort: any failure (bad URL, network, JSON, nesting depth) falls back.
        logger.exception("Failed to load tasks from %s", source)
        error = _error_message(e)

    if tasks:
        logger.info("Loaded %d tasks from %s", len(tasks), source)
        return LoadResult(tasks=tasks, error=error, used_fallback=False)

    tasks = generate_sales_tasks(fallback_count, seed=fallback_seed)
    logger.info("No task data from %s; generated %d sample tasks.", source, len(tasks))
    return LoadResult(tasks=tasks, error=error, used_fallback=True)
