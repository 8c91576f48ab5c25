# src/taskglitch/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, view, activity log and user profile into AppState,
- runs the one-time initial load.
"""

from __future__ import annotations

import logging

import httpx

from ..config import get_settings
from ..core.ports import Clock, IdFactory, random_task_id, utc_now
from ..core.state import AppState, UserProfile
from ..tasks.activity import ActivityLog
from ..tasks.task_loader import LoadResult, load_initial_tasks
from ..tasks.task_store import TaskStore
from ..tasks.task_view import TaskView

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.export_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    clock: Clock = utc_now,
    id_factory: IdFactory = random_task_id,
) -> AppState:
    """
    Create AppState from the provided settings, with an empty store.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(clock=clock, id_factory=id_factory)
    return AppState(
        settings=settings,
        store=store,
        view=TaskView(store),
        activity=ActivityLog(limit=settings.activity_limit, clock=clock, id_factory=id_factory),
        user=UserProfile(name=settings.user_name, email=settings.user_email),
    )


async def hydrate_state(
    state: AppState,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LoadResult:
    """Load the initial collection into the store. Never raises on load failures."""
    settings = state.settings
    result = await load_initial_tasks(
        settings.tasks_source,
        fallback_count=settings.fallback_task_count,
        fallback_seed=settings.fallback_seed,
        timeout=settings.load_timeout_seconds,
        transport=transport,
    )
    with state.lock:
        state.store.replace_all(result.tasks)
        state.load_error = result.error
    if result.error:
        logger.warning("Initial load failed (%s); using generated tasks.", result.error)
    return result
