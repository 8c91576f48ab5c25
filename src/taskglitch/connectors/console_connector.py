# src/taskglitch/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def greeting(state: AppState) -> str:
    app_name = str(getattr(state.settings, "app_name", "TaskGlitch"))
    lines = [f"{app_name}: welcome back, {state.user.first_name or state.user.name}."]
    if state.load_error:
        lines.append(f"[LOAD] {state.load_error} (showing generated sample tasks)")
    lines.append(f"{state.store.count_tasks()} tasks loaded. Use /help for commands, /exit to quit.")
    return "\n".join(lines)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts(greeting(state) + "\n")

    lock = getattr(state, "lock", None)

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (e.g. export)
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            if lock:
                with lock:
                    cmd_response = command_registry.handle(state, user_input, emit=emit)
            else:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)

    logger.info("Console connector finished.")
