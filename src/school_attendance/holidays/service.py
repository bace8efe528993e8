from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.academic_year import AcademicYear
from ..common.datetime_utils import inclusive_days
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ACADEMIC_YEAR_START_MONTH
from ..core.context import RequestContext
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import CalendarScope, SchoolDays
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class CalendarService:
    """Resolves date ranges to school days and manages the holiday calendar."""

    def __init__(self, holidays: HolidayRepository, *, start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH):
        self._holidays = holidays
        self._start_month = int(start_month)

    @property
    def start_month(self) -> int:
        return self._start_month

    def school_days_in_range(self, scope: CalendarScope, start: date, end: date) -> SchoolDays:
        total = inclusive_days(start, end)
        holidays = self._holidays.count_in_range(
            academic_year=scope.academic_year,
            start_date=start,
            end_date=end,
            school_id=scope.school_id,
        )
        return SchoolDays(total_days=total, holiday_count=int(holidays))

    def list_holidays(self, ctx: RequestContext, *, academic_year: Optional[str] = None) -> list[dict]:
        year = AcademicYear.parse(academic_year) if academic_year else None
        return [
            {
                "id": h.holiday_id,
                "holiday_date": h.holiday_date.isoformat(),
                "description": h.description,
                "academic_year": str(h.academic_year),
            }
            for h in self._holidays.list_for_school(ctx.school_id, academic_year=year)
        ]

    def add_holiday(self, ctx: RequestContext, *, holiday_date: Optional[date], description: str, academic_year: str) -> int:
        if not ctx.is_admin:
            raise AuthorizationError("Only admins can manage holidays")
        if not holiday_date or not description or not academic_year:
            raise ValidationError("Date, description, and academic year are required")

        year = AcademicYear.parse(academic_year)
        if not year.contains(holiday_date, self._start_month):
            raise ValidationError(f"{holiday_date.isoformat()} is outside academic year {year}")

        holiday_id = self._holidays.create(
            school_id=ctx.school_id,
            holiday_date=holiday_date,
            description=require_non_empty(description, "Description"),
            academic_year=year,
        )
        logger.info("Holiday %s declared for school %s (%s)", holiday_date.isoformat(), ctx.school_id, year)
        return holiday_id

    def delete_holiday(self, ctx: RequestContext, holiday_id: int) -> None:
        if not ctx.is_admin:
            raise AuthorizationError("Only admins can manage holidays")
        if not self._holidays.delete(holiday_id=int(holiday_id), school_id=ctx.school_id):
            raise NotFoundError("Holiday not found")
