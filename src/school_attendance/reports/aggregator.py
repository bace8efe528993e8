"""Pure attendance arithmetic shared by every report.

Nothing here touches storage: callers supply school-day counts from the calendar
and status counts from the ledger.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..attendance.model import StatusCounts
from ..core.constants import UNMARKED_COUNTS_AS_PRESENT
from ..core.enums import AttendanceStatus, Gender
from ..holidays.model import SchoolDays
from .model import DayBreakdown, PeriodStats

_CENT = Decimal("0.01")


def round2(value) -> float:
    """Round half-up to two decimals."""
    return float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round2(Decimal(int(part)) * 100 / Decimal(int(whole)))


def period_stats(
    days: SchoolDays,
    counts: StatusCounts,
    *,
    unmarked_counts_as_present: bool = UNMARKED_COUNTS_AS_PRESENT,
) -> PeriodStats:
    school_days = days.school_days
    unmarked = max(0, school_days - counts.marked)
    effective_present = counts.present + counts.late
    if unmarked_counts_as_present:
        effective_present += unmarked

    return PeriodStats(
        total_days=days.total_days,
        holidays=days.holiday_count,
        school_days=school_days,
        present=counts.present,
        absent=counts.absent,
        late=counts.late,
        unmarked=unmarked,
        effective_present=effective_present,
        attendance_percentage=percentage(effective_present, school_days),
        late_percentage=percentage(counts.late, school_days),
    )


def combine(parts: Iterable[PeriodStats]) -> PeriodStats:
    """Sum period records and recompute percentages from the totals (never averaged)."""

    total = PeriodStats.empty()
    for p in parts:
        total = PeriodStats(
            total_days=total.total_days + p.total_days,
            holidays=total.holidays + p.holidays,
            school_days=total.school_days + p.school_days,
            present=total.present + p.present,
            absent=total.absent + p.absent,
            late=total.late + p.late,
            unmarked=total.unmarked + p.unmarked,
            effective_present=total.effective_present + p.effective_present,
        )

    return PeriodStats(
        total_days=total.total_days,
        holidays=total.holidays,
        school_days=total.school_days,
        present=total.present,
        absent=total.absent,
        late=total.late,
        unmarked=total.unmarked,
        effective_present=total.effective_present,
        attendance_percentage=percentage(total.effective_present, total.school_days),
        late_percentage=percentage(total.late, total.school_days),
    )


def day_breakdown(statuses: Iterable) -> DayBreakdown:
    """Tally one day's statuses; None means no record (unmarked)."""

    present = absent = late = unmarked = 0
    for status in statuses:
        if status is None:
            unmarked += 1
        elif status == AttendanceStatus.PRESENT:
            present += 1
        elif status == AttendanceStatus.ABSENT:
            absent += 1
        elif status == AttendanceStatus.LATE:
            late += 1

    total = present + absent + late + unmarked
    return DayBreakdown(
        total=total,
        present=present,
        absent=absent,
        late=late,
        unmarked=unmarked,
        present_including_late=present + late,
        attendance_percentage=percentage(present + late, total),
    )


def gender_breakdown(rows: Iterable[tuple]) -> dict[Gender, DayBreakdown]:
    """Per-gender day tallies from (gender, status) pairs."""

    by_gender: dict[Gender, list] = {g: [] for g in Gender}
    for gender, status in rows:
        by_gender[Gender(gender)].append(status)
    return {g: day_breakdown(statuses) for g, statuses in by_gender.items()}
