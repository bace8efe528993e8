from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PeriodStats:
    """Normalized attendance figures for one student over one date range."""

    total_days: int
    holidays: int
    school_days: int
    present: int
    absent: int
    late: int
    unmarked: int
    effective_present: int
    attendance_percentage: float = 0.0
    late_percentage: float = 0.0

    @classmethod
    def empty(cls) -> "PeriodStats":
        return cls(0, 0, 0, 0, 0, 0, 0, 0)

    def period_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "holidays": self.holidays,
            "total_school_days": self.school_days,
        }

    def attendance_dict(self) -> dict:
        return {
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "unmarked": self.unmarked,
            "total_present": self.effective_present,
            "attendance_percentage": self.attendance_percentage,
            "late_percentage": self.late_percentage,
        }


@dataclass(frozen=True)
class DayBreakdown:
    """One day's four-way tally (present, absent, late, unmarked) for a group of students."""

    total: int
    present: int
    absent: int
    late: int
    unmarked: int
    present_including_late: int
    attendance_percentage: float

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "unmarked": self.unmarked,
            "present_including_late": self.present_including_late,
            "attendance_percentage": self.attendance_percentage,
        }
