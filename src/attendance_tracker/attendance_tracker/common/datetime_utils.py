from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_epoch_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def iso_or_none(value) -> str | None:
    return value.isoformat() if value is not None else None
