from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Optional

from ..attendance.model import StatusCounts
from ..attendance.service import AttendanceLedgerService
from ..classes.model import SchoolClass, Student
from ..classes.service import RosterService
from ..common.academic_year import AcademicYear
from ..common.datetime_utils import Clock, SystemClock, month_bounds
from ..core.constants import UNMARKED_COUNTS_AS_PRESENT
from ..core.context import RequestContext
from ..core.enums import Gender
from ..core.exceptions import ValidationError
from ..holidays.model import CalendarScope, SchoolDays
from ..holidays.service import CalendarService
from .aggregator import combine, day_breakdown, gender_breakdown, period_stats
from .model import PeriodStats

logger = logging.getLogger(__name__)


def _student_header(s: Student, c: SchoolClass) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "roll_number": s.roll_number,
        "standard": c.standard,
        "section": c.section,
    }


def _class_header(c: SchoolClass) -> dict:
    return {
        "id": c.class_id,
        "standard": c.standard,
        "section": c.section,
        "academic_year": str(c.academic_year),
    }


class ReportService:
    """Period Aggregator: ledger counts + calendar days -> attendance statistics."""

    def __init__(
        self,
        roster: RosterService,
        ledger: AttendanceLedgerService,
        calendar_service: CalendarService,
        *,
        clock: Optional[Clock] = None,
        unmarked_counts_as_present: bool = UNMARKED_COUNTS_AS_PRESENT,
    ):
        self._roster = roster
        self._ledger = ledger
        self._calendar = calendar_service
        self._clock = clock or SystemClock()
        self._unmarked_present = bool(unmarked_counts_as_present)

    def _stats(self, days: SchoolDays, counts: Optional[StatusCounts]) -> PeriodStats:
        return period_stats(days, counts or StatusCounts(), unmarked_counts_as_present=self._unmarked_present)

    def _year_span(self, year: AcademicYear) -> tuple[date, date]:
        """Academic year start through the end of the current month, capped at year end."""

        start_month = self._calendar.start_month
        today = self._clock.today()
        start = year.first_day(start_month)
        end = min(year.last_day(start_month), month_bounds(today.year, today.month)[1])
        return start, end

    # -- single student -----------------------------------------------------

    def student_attendance(
        self,
        ctx: RequestContext,
        *,
        student_id: int,
        start: Optional[date],
        end: Optional[date],
        academic_year: Optional[str] = None,
    ) -> dict:
        if not start or not end:
            raise ValidationError("Start date and end date are required")

        student, school_class = self._roster.student_for(ctx, student_id)
        year = AcademicYear.parse(academic_year) if academic_year else student.academic_year
        scope = CalendarScope(academic_year=year, school_id=school_class.school_id)

        days = self._calendar.school_days_in_range(scope, start, end)
        counts = self._ledger.counts_by_status([student.student_id], start, end).get(student.student_id)
        stats = self._stats(days, counts)

        return {
            "student": _student_header(student, school_class),
            "period": {"start_date": start.isoformat(), "end_date": end.isoformat(), **stats.period_dict()},
            "attendance": stats.attendance_dict(),
        }

    def student_yearly_report(self, ctx: RequestContext, *, student_id: int, academic_year: Optional[str]) -> dict:
        if not student_id or not academic_year:
            raise ValidationError("Student ID and academic year are required")

        year = AcademicYear.parse(academic_year)
        student, school_class = self._roster.student_for(ctx, student_id)
        scope = CalendarScope(academic_year=year, school_id=school_class.school_id)
        today = self._clock.today()

        monthly: list[dict] = []
        months: list[PeriodStats] = []
        for y, m in year.months(self._calendar.start_month):
            month_start, month_end = month_bounds(y, m)
            if month_start > today:
                continue

            days = self._calendar.school_days_in_range(scope, month_start, month_end)
            counts = self._ledger.counts_by_status([student.student_id], month_start, month_end).get(student.student_id)
            stats = self._stats(days, counts)
            months.append(stats)
            monthly.append(
                {
                    "month": m,
                    "year": y,
                    "month_name": calendar.month_name[m],
                    "present": stats.present,
                    "late": stats.late,
                    "absent": stats.absent,
                    "total_present": stats.effective_present,
                    "total_school_days": stats.school_days,
                    "attendance_percentage": stats.attendance_percentage,
                }
            )

        totals = combine(months)
        logger.debug("Yearly report for student %s (%s): %d months", student.student_id, year, len(monthly))

        return {
            "student": _student_header(student, school_class),
            "academic_year": str(year),
            "yearly_summary": {
                "present": totals.present,
                "late": totals.late,
                "absent": totals.absent,
                "total_present": totals.effective_present,
                "total_school_days": totals.school_days,
                "attendance_percentage": totals.attendance_percentage,
                "late_percentage": totals.late_percentage,
            },
            "monthly_breakdown": monthly,
        }

    # -- whole class --------------------------------------------------------

    def class_monthly_report(self, ctx: RequestContext, *, class_id: int, month: int, year: int) -> dict:
        if not class_id or not month or not year:
            raise ValidationError("Class ID, month, and year are required")

        month_start, month_end = month_bounds(int(year), int(month))
        school_class = self._roster.class_for(ctx, class_id)
        students = self._roster.students_of(school_class.class_id)

        scope = CalendarScope(academic_year=school_class.academic_year, school_id=school_class.school_id)
        days = self._calendar.school_days_in_range(scope, month_start, month_end)
        counts = self._ledger.counts_by_status([s.student_id for s in students], month_start, month_end)

        rows = []
        for s in students:
            stats = self._stats(days, counts.get(s.student_id))
            rows.append(
                {
                    "student_id": s.student_id,
                    "name": s.name,
                    "roll_number": s.roll_number,
                    "present": stats.present,
                    "late": stats.late,
                    "absent": stats.absent,
                    "total_present": stats.effective_present,
                    "attendance_percentage": stats.attendance_percentage,
                    "late_percentage": stats.late_percentage,
                }
            )

        return {
            "class": _class_header(school_class),
            "period": {"month": int(month), "year": int(year), **days_dict(days)},
            "students": rows,
        }

    def class_daily_report(self, ctx: RequestContext, *, class_id: int, day: Optional[date]) -> dict:
        if not class_id or not day:
            raise ValidationError("Class ID and date are required")

        school_class = self._roster.class_for(ctx, class_id)
        students = self._roster.students_of(school_class.class_id)
        statuses = self._ledger.statuses_on([s.student_id for s in students], day)

        overall = day_breakdown(statuses.get(s.student_id) for s in students)
        by_gender = gender_breakdown((s.gender, statuses.get(s.student_id)) for s in students)

        return {
            "class": _class_header(school_class),
            "date": day.isoformat(),
            "statistics": {
                "total_students": overall.total,
                "total_marked": overall.present + overall.absent + overall.late,
                "total_unmarked": overall.unmarked,
                "present": overall.present,
                "absent": overall.absent,
                "late": overall.late,
                "present_including_late": overall.present_including_late,
                "attendance_percentage": overall.attendance_percentage,
            },
            "gender_breakdown": {g.value: by_gender[g].to_dict() for g in Gender},
            "students": [
                {
                    "id": s.student_id,
                    "roll_number": s.roll_number,
                    "name": s.name,
                    "gender": s.gender.value,
                    "status": statuses[s.student_id].value if s.student_id in statuses else "unmarked",
                }
                for s in students
            ],
        }

    def class_yearly_report(self, ctx: RequestContext, *, class_id: int, academic_year: Optional[str]) -> dict:
        """Year-to-date figures for every student of a class (used before promotion)."""

        if not class_id or not academic_year:
            raise ValidationError("Class ID and academic year are required")

        year = AcademicYear.parse(academic_year)
        school_class = self._roster.class_for(ctx, class_id)
        students = [s for s in self._roster.students_of(school_class.class_id) if s.academic_year == year]
        if not students:
            return {"class": _class_header(school_class), "academic_year": str(year), "students": []}

        start, end = self._year_span(year)
        if end < start:
            days = SchoolDays(total_days=0, holiday_count=0)
            counts = {}
        else:
            scope = CalendarScope(academic_year=year, school_id=school_class.school_id)
            days = self._calendar.school_days_in_range(scope, start, end)
            counts = self._ledger.counts_by_status([s.student_id for s in students], start, end)

        rows = []
        for s in students:
            stats = self._stats(days, counts.get(s.student_id))
            rows.append(
                {
                    "student_id": s.student_id,
                    "roll_number": s.roll_number,
                    "name": s.name,
                    "standard": school_class.standard,
                    "section": school_class.section,
                    "present": stats.present,
                    "late": stats.late,
                    "absent": stats.absent,
                    "total_present": stats.effective_present,
                    "total_school_days": stats.school_days,
                    "attendance_percentage": stats.attendance_percentage,
                }
            )

        return {"class": _class_header(school_class), "academic_year": str(year), "students": rows}


def days_dict(days: SchoolDays) -> dict:
    return {"total_days": days.total_days, "holidays": days.holiday_count, "total_school_days": days.school_days}
