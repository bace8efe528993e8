from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class DayMark:
    student_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def marked(self) -> int:
        return self.present + self.absent + self.late

    @classmethod
    def from_rows(cls, rows) -> "StatusCounts":
        """Build from (status, count) pairs; missing statuses count as zero."""

        counts = {s: 0 for s in AttendanceStatus}
        for status, n in rows:
            counts[AttendanceStatus(status)] = int(n)
        return cls(
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            late=counts[AttendanceStatus.LATE],
        )
