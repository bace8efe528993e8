from __future__ import annotations

from datetime import date
from typing import Dict, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import DayMark, StatusCounts


class AttendanceRepository(Protocol):
    def upsert(self, *, student_id: int, attendance_date: date, status: AttendanceStatus, marked_by: int) -> None:
        raise NotImplementedError

    def replace_class_day(
        self,
        *,
        class_id: int,
        attendance_date: date,
        marks: Sequence[DayMark],
        marked_by: int,
    ) -> int:
        """Replace a class's marks for one day atomically.

        Raises UnauthorizedMembership (and writes nothing) if any mark references a
        student outside the class. Returns the number of records written.
        """

        raise NotImplementedError

    def counts_by_status(
        self,
        student_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Dict[int, StatusCounts]:
        """Counts per student over [start_date, end_date]; every requested id is present."""

        raise NotImplementedError

    def statuses_on(self, student_ids: Sequence[int], attendance_date: date) -> Dict[int, AttendanceStatus]:
        """Recorded status per student on one day; unmarked students are absent from the map."""

        raise NotImplementedError
