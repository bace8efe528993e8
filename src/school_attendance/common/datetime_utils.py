from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Protocol, Tuple

from ..core.exceptions import InvalidRange, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def inclusive_days(start: date, end: date) -> int:
    if end < start:
        raise InvalidRange(f"End date {end.isoformat()} is before start date {start.isoformat()}")
    return (end - start).days + 1


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if not 1 <= int(year) <= 9999:
        raise ValidationError(f"Invalid year: {year}")
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


class Clock(Protocol):
    def today(self) -> date:
        raise NotImplementedError


class SystemClock:
    """Local calendar date of the deployment.

    Note: Wrapped so services can be given a fixed clock in tests.
    """

    def today(self) -> date:
        return date.today()
