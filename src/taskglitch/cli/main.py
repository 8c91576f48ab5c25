# src/taskglitch/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, awaits the initial task load once,
then runs the console REPL. Mutations are only accepted after the load
has finished, so user edits never race the initial hydration.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, hydrate_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    asyncio.run(hydrate_state(state))

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
