"""Core data schema for task log entries and login sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

LOGIN = "login"
LOGOUT = "logout"
BOUNDARY_TYPES = frozenset({LOGIN, LOGOUT})

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class TaskEntry:
    """One line of the task log."""

    timestamp: Optional[datetime]
    type: str
    content: str = ""

    @property
    def is_boundary(self) -> bool:
        return self.type in BOUNDARY_TYPES


@dataclass
class SessionDuration:
    """Elapsed time of a login session as reported by ``last``."""

    days: Optional[int]
    hours: int
    minutes: int


@dataclass
class SessionEvent:
    """Most recent login and the end of the session before it."""

    login: Optional[datetime]
    logout: Optional[datetime]


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as ``yyyy-MM-ddTHH:mm:ss+HH:MM``."""

    if value.tzinfo is None:
        value = value.astimezone()
    return value.replace(microsecond=0).isoformat(timespec="seconds")


def parse_timestamp(raw: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None when it is not one."""

    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        value = datetime.fromisoformat(text)
    except ValueError:
        return None
    if value.tzinfo is None:
        value = value.astimezone()
    return value
