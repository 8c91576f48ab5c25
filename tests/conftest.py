# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskglitch.cli.bootstrap import create_initial_state
from taskglitch.core.state import AppState
from taskglitch.tasks.task_store import TaskStore

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def store(clock: FakeClock, ids: SequentialIds) -> TaskStore:
    return TaskStore(clock=clock, id_factory=ids)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskGlitch",
        log_level="INFO",
        data_dir=tmp_path / "data",
        tasks_source=str(tmp_path / "tasks.json"),
        load_timeout_seconds=1.0,
        fallback_task_count=5,
        fallback_seed=7,
        activity_limit=50,
        export_path=tmp_path / "data" / "tasks.csv",
        user_name="Jordan Lee",
        user_email="jordan@example.com",
    )


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock, ids: SequentialIds) -> AppState:
    """AppState wired with a fake clock and sequential ids, empty store."""
    return create_initial_state(settings=settings, clock=clock, id_factory=ids)
