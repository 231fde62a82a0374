"""Adapter reading login sessions from the system ``last`` command."""

from __future__ import annotations

import logging
import re
import subprocess
from datetime import datetime
from typing import Callable, Optional, Sequence

from tasklog_engine.duration import logout_day_shift, parse_duration
from tasklog_engine.schema import SessionEvent

logger = logging.getLogger(__name__)

_LOGIN_RE = re.compile(r"(\w{3}\s+\d+)\s+(\d{2}:\d{2})")
_LOGOUT_RE = re.compile(r"(\w{3}\s+\d+)\s+\d{2}:\d{2} - (\d{2}:\d{2})\s+(\((?:\d+\+)?\d{2}:\d{2}\))")


def _wall_time(date_str: str, time_str: str, year: int) -> Optional[datetime]:
    # ``last`` omits the year, so the session is placed in ``year``. The result
    # is naive local time; day arithmetic happens before the offset is fixed.
    text = f"{' '.join(date_str.split())} {year} {time_str}"
    try:
        naive = datetime.strptime(text, "%b %d %Y %H:%M")
    except ValueError:
        logger.debug("Unparseable session date '%s'", text)
        return None
    return naive


def parse_login_line(line: str, year: int) -> Optional[datetime]:
    """Start time of the session described by one ``last`` line."""

    match = _LOGIN_RE.search(line)
    if not match:
        return None
    date_str, time_str = match.groups()
    login = _wall_time(date_str, time_str, year)
    return login.astimezone() if login is not None else None


def parse_logout_line(line: str, year: int) -> Optional[datetime]:
    """End time of a completed session described by one ``last`` line."""

    match = _LOGOUT_RE.search(line)
    if not match:
        return None
    date_str, end_time, duration_raw = match.groups()

    logout = _wall_time(date_str, end_time, year)
    if logout is None:
        return None
    try:
        duration = parse_duration(duration_raw)
    except ValueError:
        logger.debug("Unparseable session duration '%s'", duration_raw)
        return None
    return (logout + logout_day_shift(duration)).astimezone()


def filter_session_lines(output: str, terminal: str) -> list[str]:
    """Lines of ``last`` output that belong to ``terminal``, newest first."""

    return [line for line in output.splitlines() if terminal in line]


class SessionHistory:
    """Reads the most recent sessions of one terminal from ``last``."""

    def __init__(
        self,
        command: Sequence[str] = ("last",),
        terminal: str = "console",
        timeout: float = 5.0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.command = list(command)
        self.terminal = terminal
        self.timeout = timeout
        self.clock = clock

    def _session_lines(self) -> list[str]:
        try:
            completed = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Session query %s timed out after %.1fs", self.command, self.timeout)
            return []
        except OSError as exc:
            logger.warning("Session query %s failed: %s", self.command, exc)
            return []

        if completed.returncode != 0:
            logger.warning(
                "Session query %s exited with %d: %s",
                self.command,
                completed.returncode,
                completed.stderr.strip(),
            )
            return []
        return filter_session_lines(completed.stdout, self.terminal)

    def snapshot(self) -> SessionEvent:
        """Query ``last`` once and return the latest login and logout."""

        lines = self._session_lines()
        year = self.clock().year
        login = parse_login_line(lines[0], year) if lines else None
        logout = parse_logout_line(lines[1], year) if len(lines) > 1 else None
        logger.debug("Session snapshot: login=%s logout=%s", login, logout)
        return SessionEvent(login=login, logout=logout)

    def last_login_time(self) -> Optional[datetime]:
        return self.snapshot().login

    def last_logout_time(self) -> Optional[datetime]:
        return self.snapshot().logout
