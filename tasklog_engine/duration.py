"""Parser for the session duration column of ``last``."""

from __future__ import annotations

import re
from datetime import timedelta

from tasklog_engine.schema import SessionDuration

_DURATION_RE = re.compile(r"^(?:(\d+)\+)?(\d{2}):(\d{2})$")


def parse_duration(raw: str) -> SessionDuration:
    """Parse ``(D+HH:MM)`` or ``(HH:MM)``; the parentheses may be omitted."""

    text = raw.strip()
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1].strip()

    match = _DURATION_RE.match(text)
    if not match:
        raise ValueError(f"Malformed session duration '{raw}'")

    days_raw, hours_raw, minutes_raw = match.groups()
    return SessionDuration(
        days=int(days_raw) if days_raw is not None else None,
        hours=int(hours_raw),
        minutes=int(minutes_raw),
    )


def logout_day_shift(duration: SessionDuration) -> timedelta:
    """Days to add to a session's start date to land on its logout date.

    Sessions reported with a day component ended ``1 + days`` calendar days
    after the date printed by ``last``. Without one, the end time is taken on
    the start date, even when it wrapped past midnight.
    """

    if duration.days is None:
        return timedelta(0)
    return timedelta(days=1 + duration.days)
