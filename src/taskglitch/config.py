# src/taskglitch/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKGLITCH"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Initial load ----
    tasks_source: str
    load_timeout_seconds: float
    fallback_task_count: int
    fallback_seed: int

    # ---- Activity / export ----
    activity_limit: int
    export_path: Path

    # ---- User profile (read-only) ----
    user_name: str
    user_email: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskGlitch").strip() or "TaskGlitch"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskglitch"))

        tasks_source = _env(_k("TASKS_SOURCE"), "tasks.json").strip() or "tasks.json"
        load_timeout_seconds = max(0.1, _env_float(_k("LOAD_TIMEOUT_SECONDS"), 10.0))
        fallback_task_count = max(0, _env_int(_k("FALLBACK_TASK_COUNT"), 50))
        fallback_seed = _env_int(_k("FALLBACK_SEED"), 42)

        activity_limit = max(1, _env_int(_k("ACTIVITY_LIMIT"), 50))
        export_path = _env_path(_k("EXPORT_PATH"), data_dir / "tasks.csv")

        user_name = _env(_k("USER_NAME"), "Alex Carter").strip() or "Alex Carter"
        user_email = _env(_k("USER_EMAIL"), "alex@example.com").strip()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_source=tasks_source,
            load_timeout_seconds=load_timeout_seconds,
            fallback_task_count=fallback_task_count,
            fallback_seed=fallback_seed,
            activity_limit=activity_limit,
            export_path=export_path,
            user_name=user_name,
            user_email=user_email,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load .env (never overriding real env vars) and build Settings once."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
