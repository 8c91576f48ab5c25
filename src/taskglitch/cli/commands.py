# src/taskglitch/cli/commands.py

from __future__ import annotations

import inspect
import logging
import math
import shlex
from collections.abc import Callable
from typing import Any, cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_export import write_csv
from ..tasks.task_logic import count_by_status, revenue_by_priority
from ..tasks.task_models import DerivedTask, Metrics, TaskPriority, TaskStatus
from ..tasks.task_view import ALL, NO_FILTER, TaskFilter

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Arguments are split shell-style, so quoted titles keep their spaces.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----

_FIELD_ALIASES = {
    "title": "title",
    "status": "status",
    "priority": "priority",
    "revenue": "revenue",
    "hours": "time_taken",
    "time": "time_taken",
    "time_taken": "time_taken",
    "timetaken": "time_taken",
    "id": "task_id",
}


class UsageError(ValueError):
    pass


def _parse_status(raw: str) -> TaskStatus:
    status = TaskStatus.lookup(raw)
    if status is None:
        raise UsageError(f"Unknown status {raw!r}. Use Todo, 'In Progress' or Done.")
    return status


def _parse_priority(raw: str) -> TaskPriority:
    priority = TaskPriority.lookup(raw)
    if priority is None:
        raise UsageError(f"Unknown priority {raw!r}. Use High, Medium or Low.")
    return priority


def _parse_number(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise UsageError(f"{name} must be a number, got {raw!r}.") from None
    if not math.isfinite(value):
        raise UsageError(f"{name} must be a finite number, got {raw!r}.")
    return value


def _parse_fields(args: list[str]) -> tuple[list[str], dict[str, Any]]:
    """Split args into positional words and typed key=value fields."""
    words: list[str] = []
    fields: dict[str, Any] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            words.append(arg)
            continue
        field = _FIELD_ALIASES.get(key.strip().lower())
        if field is None:
            raise UsageError(f"Unknown field {key!r}.")
        if field == "status":
            fields[field] = _parse_status(value)
        elif field == "priority":
            fields[field] = _parse_priority(value)
        elif field in ("revenue", "time_taken"):
            fields[field] = _parse_number(key, value)
        else:
            fields[field] = value
    return words, fields


def _fmt_money(value: float) -> str:
    return f"${value:,.2f}"


def _fmt_task(t: DerivedTask) -> str:
    return (
        f"{t.id}  {t.title}  [{t.status.value} | {t.priority.value}]  "
        f"{_fmt_money(t.revenue)} / {t.time_taken:g}h  ROI {t.roi:,.1f}"
    )


def _fmt_metrics(m: Metrics) -> str:
    return (
        f"  Total revenue: {_fmt_money(m.total_revenue)}\n"
        f"  Time taken: {m.total_time_taken:g}h\n"
        f"  Time efficiency: {m.time_efficiency_pct:.1f}%\n"
        f"  Revenue/hour: {_fmt_money(m.revenue_per_hour)}\n"
        f"  Average ROI: {m.average_roi:,.1f}\n"
        f"  Grade: {m.performance_grade}"
    )


def _fmt_filter(f: TaskFilter) -> str:
    if not f.is_active:
        return "none"
    parts = []
    if f.query:
        parts.append(f"title~{f.query!r}")
    if f.status != ALL:
        parts.append(f"status={f.status}")
    if f.priority != ALL:
        parts.append(f"priority={f.priority}")
    return ", ".join(parts)


# ---- handlers ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    undo = state.store.last_deleted
    lines = [
        "Status:",
        f"  Source: {getattr(settings, 'tasks_source', '?')}",
        f"  Tasks: {state.store.count_tasks()} (shown: {len(state.view.filtered(state.task_filter))})",
        f"  Filter: {_fmt_filter(state.task_filter)}",
        f"  Undo: {'available for ' + undo.id if undo else 'nothing to undo'}",
    ]
    if state.load_error:
        lines.append(f"  Load error: {state.load_error}")
    return "\n".join(lines)


def cmd_whoami(state: AppState, args: list[str]) -> str:
    user = state.user
    return f"{user.name} <{user.email}>" if user.email else user.name


def cmd_list(state: AppState, args: list[str]) -> str:
    """/list [n] -> filtered tasks, best ROI first."""
    limit = 20
    if args:
        try:
            limit = max(1, int(args[0]))
        except ValueError:
            return "Usage: /list [n]"
    tasks = state.view.filtered(state.task_filter)
    if not tasks:
        return "No tasks match the current filter."
    lines = [f"Tasks ({len(tasks)} shown, filter: {_fmt_filter(state.task_filter)}):"]
    lines.extend(f"{i}. {_fmt_task(t)}" for i, t in enumerate(tasks[:limit], start=1))
    if len(tasks) > limit:
        lines.append(f"... {len(tasks) - limit} more (use /list {len(tasks)})")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add "Call Acme" revenue=1200 hours=2 priority=High status=Todo
    Words without '=' form the title.
    """
    try:
        words, fields = _parse_fields(args)
    except UsageError as e:
        return str(e)
    title = fields.pop("title", None) or " ".join(words)
    if not title.strip():
        return "Usage: /add <title> [revenue=] [hours=] [priority=] [status=] [id=]"
    task = task_api.add_task(state, title=title, **fields)
    return f"Added {task.id}: {task.title} ({task.time_taken:g}h, {_fmt_money(task.revenue)})"


def cmd_update(state: AppState, args: list[str]) -> str:
    """/update <id> field=value ..."""
    if len(args) < 2:
        return "Usage: /update <id> [title=] [revenue=] [hours=] [priority=] [status=]"
    task_id = args[0]
    try:
        words, fields = _parse_fields(args[1:])
    except UsageError as e:
        return str(e)
    fields.pop("task_id", None)
    if words or not fields:
        return "Usage: /update <id> [title=] [revenue=] [hours=] [priority=] [status=]"
    if not task_api.update_task(state, task_id, fields):
        return f"No task with id {task_id}."
    return f"Updated {task_id}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    deleted = task_api.delete_task(state, args[0])
    if deleted is None:
        return f"No task with id {args[0]}."
    return f"Deleted {deleted.id}: {deleted.title}. Use /undo to restore or /dismiss to forget."


def cmd_undo(state: AppState, args: list[str]) -> str:
    restored = task_api.undo_delete(state)
    if restored is None:
        return "Nothing to undo."
    return f"Restored {restored.id}: {restored.title}."


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    task_api.dismiss_undo(state)
    return "Undo dismissed."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                -> show current filter
    /filter clear          -> remove all filters
    /filter q=acme status=Done priority=High   (All disables a dimension)
    """
    if not args:
        return f"Filter: {_fmt_filter(state.task_filter)}"
    if args[0].lower() in ("clear", "reset", "off"):
        state.task_filter = NO_FILTER
        return "Filter cleared."

    query = state.task_filter.query
    status: TaskStatus | str = state.task_filter.status
    priority: TaskPriority | str = state.task_filter.priority
    try:
        for arg in args:
            key, sep, value = arg.partition("=")
            key = key.strip().lower()
            if not sep:
                raise UsageError("Usage: /filter [q=] [status=] [priority=] | /filter clear")
            if key in ("q", "query", "title"):
                query = value
            elif key == "status":
                status = ALL if value.lower() == ALL.lower() else _parse_status(value)
            elif key == "priority":
                priority = ALL if value.lower() == ALL.lower() else _parse_priority(value)
            else:
                raise UsageError(f"Unknown filter {key!r}.")
    except UsageError as e:
        return str(e)

    state.task_filter = TaskFilter(query=query, status=status, priority=priority)
    shown = len(state.view.filtered(state.task_filter))
    return f"Filter: {_fmt_filter(state.task_filter)} ({shown} tasks)"


def cmd_metrics(state: AppState, args: list[str]) -> str:
    metrics = state.view.filtered_metrics(state.task_filter)
    return f"Metrics (filter: {_fmt_filter(state.task_filter)}):\n{_fmt_metrics(metrics)}"


def cmd_stats(state: AppState, args: list[str]) -> str:
    tasks = state.view.filtered(state.task_filter)
    lines = ["Tasks by status:"]
    lines.extend(f"  {s.value}: {n}" for s, n in count_by_status(tasks).items())
    lines.append("Revenue by priority:")
    lines.extend(f"  {p.value}: {_fmt_money(v)}" for p, v in revenue_by_priority(tasks).items())
    return "\n".join(lines)


def cmd_log(state: AppState, args: list[str]) -> str:
    limit = 10
    if args:
        try:
            limit = max(1, int(args[0]))
        except ValueError:
            return "Usage: /log [n]"
    entries = state.activity.entries[:limit]
    if not entries:
        return "No activity yet."
    lines = ["Recent activity:"]
    for e in entries:
        ts = e.ts.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        lines.append(f"  [{ts}] {e.kind.value}: {e.summary}")
    return "\n".join(lines)


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/export [path] -> write the filtered view as CSV."""
    target = args[0] if args else getattr(state.settings, "export_path", "tasks.csv")
    tasks = state.view.filtered(state.task_filter)
    if emit:
        emit(f"Writing {len(tasks)} tasks to {target}...")
    try:
        path = write_csv(target, tasks)
    except OSError as e:
        logger.exception("CSV export to %s failed.", target)
        return f"Export failed: {e}"
    return f"Exported {len(tasks)} tasks to {path}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show data source, counts, filter and undo state.")
registry.register("whoami", cmd_whoami, help_text="Show the current user profile.")
registry.register("list", cmd_list, help_text="List filtered tasks by ROI: /list [n].", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [revenue=] [hours=] [priority=] [status=] [id=].",
)
registry.register("update", cmd_update, help_text="Update a task: /update <id> field=value ...")
registry.register("delete", cmd_delete, help_text="Delete a task (undoable): /delete <id>.", aliases=["rm"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("dismiss", cmd_dismiss, help_text="Forget the last deleted task (no restore).")
registry.register(
    "filter",
    cmd_filter,
    help_text="Filter the view: /filter [q=] [status=] [priority=] | /filter clear.",
)
registry.register("metrics", cmd_metrics, help_text="Show metrics for the filtered view.")
registry.register("stats", cmd_stats, help_text="Show status and priority breakdowns.")
registry.register("log", cmd_log, help_text="Show recent activity: /log [n].")
registry.register("export", cmd_export, help_text="Export the filtered view as CSV: /export [path].")
