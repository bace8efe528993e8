from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.academic_year import AcademicYear


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    school_id: int
    holiday_date: date
    description: str
    academic_year: AcademicYear


@dataclass(frozen=True)
class CalendarScope:
    """Which holiday calendar applies: an academic year, optionally one school."""

    academic_year: AcademicYear
    school_id: Optional[int] = None


@dataclass(frozen=True)
class SchoolDays:
    total_days: int
    holiday_count: int

    @property
    def school_days(self) -> int:
        # May be zero or negative for a degenerate calendar; never divide by it then.
        return self.total_days - self.holiday_count
