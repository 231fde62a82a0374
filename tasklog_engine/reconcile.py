"""Reconciles a task submission against the log and login sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol

from tasklog_engine.adapters import log_file
from tasklog_engine.schema import BOUNDARY_TYPES, EPOCH, LOGIN, LOGOUT, SessionEvent, TaskEntry

logger = logging.getLogger(__name__)

ADDED_MESSAGE = "Task added"
DUPLICATE_MESSAGE = "Task already in course"


class InvalidTaskError(ValueError):
    """Raised when a submission cannot be stored as one log line."""


class SessionSource(Protocol):
    def snapshot(self) -> SessionEvent: ...


@dataclass
class RecordResult:
    """Outcome of one submission."""

    recorded: bool
    backfilled: bool
    appended: list[TaskEntry] = field(default_factory=list)

    @property
    def message(self) -> str:
        return ADDED_MESSAGE if self.recorded else DUPLICATE_MESSAGE


def _now() -> datetime:
    return datetime.now().astimezone().replace(microsecond=0)


def _validate(task_type: str, content: str) -> None:
    if not task_type:
        raise InvalidTaskError("Task type must not be empty")
    if task_type in BOUNDARY_TYPES and content:
        raise InvalidTaskError(f"Session boundary '{task_type}' takes no content")
    for name, value in (("type", task_type), ("content", content)):
        if "," in value:
            raise InvalidTaskError(f"Task {name} must not contain a comma: '{value}'")
        if "\n" in value or "\r" in value:
            raise InvalidTaskError(f"Task {name} must be a single line")


def needs_backfill(task_type: str, last: Optional[TaskEntry], login: Optional[datetime]) -> bool:
    """Whether the log missed the start of the current session."""

    if task_type in BOUNDARY_TYPES or login is None:
        return False
    if last is None:
        return login > EPOCH
    # An unparseable timestamp never compares as older.
    if last.timestamp is None:
        return False
    return login > last.timestamp


def is_novel(task_type: str, content: str, last: Optional[TaskEntry], backfilled: bool) -> bool:
    """Whether the submission differs from the task currently in course."""

    return last is None or last.type != task_type or last.content != content or backfilled


def record_task(
    task_type: str,
    content: str,
    log_path: str | Path,
    history: SessionSource,
    now: Callable[[], datetime] = _now,
) -> RecordResult:
    """Append the submission, plus any missing session boundaries, to the log.

    Boundary entries are written whenever the latest login is newer than the
    last logged entry, even if the submission itself turns out to be a
    duplicate.
    """

    task_type = task_type.strip()
    content = content.strip()
    _validate(task_type, content)

    last = log_file.last_entry(log_path)
    session = history.snapshot()

    appended: list[TaskEntry] = []
    backfilled = needs_backfill(task_type, last, session.login)
    if backfilled:
        if session.logout is not None:
            appended.append(TaskEntry(timestamp=session.logout, type=LOGOUT))
        appended.append(TaskEntry(timestamp=session.login, type=LOGIN))
        for entry in appended:
            log_file.append(log_path, entry)
        logger.debug("Backfilled %d session boundary entries", len(appended))

    if not is_novel(task_type, content, last, backfilled):
        logger.info("Rejected duplicate of active task %s,%s", task_type, content)
        return RecordResult(recorded=False, backfilled=backfilled, appended=appended)

    entry = TaskEntry(timestamp=now().replace(microsecond=0), type=task_type, content=content)
    log_file.append(log_path, entry)
    appended.append(entry)
    return RecordResult(recorded=True, backfilled=backfilled, appended=appended)
