"""Most-recently-used suggestions for task types and contents."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable

from tasklog_engine.schema import BOUNDARY_TYPES, TaskEntry

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _by_recency(entries: Iterable[TaskEntry], key: Callable[[TaskEntry], str]) -> list[str]:
    latest: dict[str, datetime] = {}
    for entry in entries:
        value = key(entry)
        stamp = entry.timestamp or _OLDEST
        if value not in latest or stamp > latest[value]:
            latest[value] = stamp
    return sorted(latest, key=lambda value: latest[value], reverse=True)


def recent_types(entries: list[TaskEntry]) -> list[str]:
    """Distinct non-boundary types, most recently used first."""

    return _by_recency((e for e in entries if e.type not in BOUNDARY_TYPES), lambda e: e.type)


def recent_contents(entries: list[TaskEntry], task_type: str) -> list[str]:
    """Distinct contents logged under ``task_type``, most recently used first."""

    return _by_recency((e for e in entries if e.type == task_type), lambda e: e.content)


def is_known(value: str, options: list[str]) -> bool:
    return value.strip() in options
