# src/taskglitch/tasks/task_export.py

"""CSV export of a task list (one header row, one row per task)."""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterable
from io import StringIO
from pathlib import Path

from .task_models import RECORD_FIELDS, DerivedTask, Task

logger = logging.getLogger(__name__)


def tasks_to_csv(tasks: Iterable[Task | DerivedTask]) -> str:
    buf = StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(RECORD_FIELDS), lineterminator="\n")
    writer.writeheader()
    for t in tasks:
        writer.writerow(t.to_record())
    return buf.getvalue()


def write_csv(path: str | Path, tasks: Iterable[Task | DerivedTask]) -> Path:
    """Write atomically (tmp file + replace). Returns the final path."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = list(tasks)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(tasks_to_csv(rows), "utf-8")
    os.replace(tmp, path)
    logger.info("Exported %d rows to %s", len(rows), path)
    return path
