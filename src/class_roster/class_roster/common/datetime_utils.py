from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def iter_dates(start: date, days: int) -> Iterator[date]:
    for offset in range(max(int(days), 0)):
        yield start + timedelta(days=offset)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
