from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def working_hours_start(working_hours: Optional[str]) -> Optional[time]:
    """Start of a ``"09:00 - 18:00"`` range, or None when unparseable."""
    if not working_hours:
        return None
    head = working_hours.split("-", 1)[0]
    try:
        return parse_hhmm(head)
    except ValueError:
        return None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_epoch_ms(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    if value.tzinfo is None:
        return int(value.timestamp() * 1000)
    return int(value.astimezone(timezone.utc).timestamp() * 1000)


def from_epoch_ms(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value) / 1000)
