"""Flat-file adapter for the task log."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from tasklog_engine.schema import TaskEntry, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_FIELD_COUNT = 3


def parse_line(line: str, line_number: int = 0) -> TaskEntry:
    """Parse ``timestamp,type,content`` without rejecting malformed input.

    Missing fields come back empty and anything after the second comma is
    kept as content.
    """

    fields = line.rstrip("\r\n").split(",", _FIELD_COUNT - 1)
    if len(fields) < _FIELD_COUNT:
        logger.debug("Line %d: expected %d fields, got %d", line_number, _FIELD_COUNT, len(fields))
        fields += [""] * (_FIELD_COUNT - len(fields))

    timestamp_raw, task_type, content = fields
    timestamp = parse_timestamp(timestamp_raw)
    if timestamp is None:
        logger.debug("Line %d: malformed timestamp '%s'", line_number, timestamp_raw)

    return TaskEntry(timestamp=timestamp, type=task_type, content=content)


def format_line(entry: TaskEntry) -> str:
    if entry.timestamp is None:
        raise ValueError("Cannot write an entry without a timestamp")
    return f"{format_timestamp(entry.timestamp)},{entry.type},{entry.content}\n"


def read_all(path: str | Path) -> list[TaskEntry]:
    """Read every entry in file order; a missing log reads as empty."""

    log_path = Path(path)
    if not log_path.exists():
        return []

    with open(log_path, encoding="utf-8") as handle:
        return [
            parse_line(line, line_number)
            for line_number, line in enumerate(handle, start=1)
            if line.strip()
        ]


def last_entry(path: str | Path) -> Optional[TaskEntry]:
    """Return the entry on the last non-empty line, if any."""

    log_path = Path(path)
    if not log_path.exists():
        return None

    last_line = None
    last_number = 0
    with open(log_path, encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if line.strip():
                last_line, last_number = line, line_number

    if last_line is None:
        return None
    return parse_line(last_line, last_number)


def append(path: str | Path, entry: TaskEntry) -> None:
    """Append one entry as a single write, creating the log if needed."""

    line = format_line(entry)
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, "a", encoding="utf-8") as handle:
        handle.write(line)
    logger.info("Appended %s", line.rstrip("\n"))
