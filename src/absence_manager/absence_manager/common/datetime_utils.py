from __future__ import annotations

import re
from datetime import date, datetime, time

from ..core.constants import ACADEMIC_YEAR_START_MONTH

HHMM_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:mm (hour may be a single digit) into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def is_hhmm(value: object) -> bool:
    return isinstance(value, str) and bool(HHMM_RE.match(value.strip()))


def hours_between(start: str, end: str) -> float:
    """Fractional hours from start to end (HH:mm strings), unrounded."""
    s = parse_hhmm(start)
    e = parse_hhmm(end)
    minutes = (e.hour * 60 + e.minute) - (s.hour * 60 + s.minute)
    return minutes / 60


def academic_year_for(day: date) -> str:
    if day.month >= ACADEMIC_YEAR_START_MONTH:
        return f"{day.year}-{day.year + 1}"
    return f"{day.year - 1}-{day.year}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
