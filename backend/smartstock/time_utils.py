from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        return dt

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from start to end, truncated toward zero."""
    return int((end - start) / timedelta(days=1))


def weeks_between(start: datetime, end: datetime) -> int:
    """Whole weeks elapsed from start to end, truncated toward zero."""
    return int((end - start) / timedelta(weeks=1))


class Clock(Protocol):
    """Source of 'now' for the ledger and the analytics engine."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock, UTC-naive."""

    def now(self) -> datetime:
        return utcnow()


class FixedClock:
    """
    Manually driven clock.

    Tests and the demo seeder move it explicitly so every timestamp the
    ledger assigns (and every window the analytics compute) is reproducible.
    """

    def __init__(self, start: datetime | None = None):
        self._lock = threading.Lock()
        self._now = start if start is not None else utcnow().replace(microsecond=0)

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = value

    def advance(self, **delta) -> datetime:
        """Move forward by ``timedelta(**delta)`` and return the new 'now'."""
        with self._lock:
            self._now = self._now + timedelta(**delta)
            return self._now
