from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, Optional, Sequence

from ..classes.service import RosterService
from ..common.datetime_utils import Clock, SystemClock
from ..core.context import RequestContext
from ..core.enums import AttendanceStatus
from ..common.validators import require_id
from ..core.exceptions import InvalidRange, PolicyError, ValidationError
from .factory import MarkingPolicyFactory
from .model import DayMark, StatusCounts
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus((value or "").strip().lower() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid attendance status: {value!r}")


class AttendanceLedgerService:
    """Use cases: mark attendance (single or whole class) and read the ledger."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        roster: RosterService,
        *,
        clock: Optional[Clock] = None,
        policy_factory: Optional[MarkingPolicyFactory] = None,
    ):
        self._attendance = attendance
        self._roster = roster
        self._clock = clock or SystemClock()
        self._policies = policy_factory or MarkingPolicyFactory()

    def _check_date(self, ctx: RequestContext, attendance_date: date) -> None:
        policy = self._policies.for_role(ctx.role)
        try:
            policy.check(target=attendance_date, today=self._clock.today())
        except PolicyError:
            logger.warning("User %s (%s) refused marking for %s", ctx.user_id, ctx.role.value, attendance_date)
            raise

    def mark_day(self, ctx: RequestContext, *, student_id: int, attendance_date: date, status) -> None:
        if not student_id or not attendance_date or not status:
            raise ValidationError("Student ID, date, and status are required")
        sid = require_id(student_id, "Student ID")
        st = parse_status(status)

        self._check_date(ctx, attendance_date)
        self._roster.student_for(ctx, sid)

        self._attendance.upsert(
            student_id=sid,
            attendance_date=attendance_date,
            status=st,
            marked_by=ctx.user_id,
        )
        logger.info("Student %s marked %s on %s by user %s", student_id, st.value, attendance_date, ctx.user_id)

    def mark_class_day(
        self,
        ctx: RequestContext,
        *,
        attendance_date: date,
        marks: Iterable,
        class_id: Optional[int] = None,
    ) -> int:
        """Replace the whole class's marks for a day; all-or-nothing."""

        if not attendance_date or marks is None:
            raise ValidationError("Date and attendance records are required")

        if class_id is None:
            school_class = self._roster.teacher_class(ctx)
        else:
            school_class = self._roster.class_for(ctx, class_id)

        batch = self._to_marks(marks)
        self._check_date(ctx, attendance_date)

        written = self._attendance.replace_class_day(
            class_id=school_class.class_id,
            attendance_date=attendance_date,
            marks=batch,
            marked_by=ctx.user_id,
        )
        logger.info(
            "Class %s marked for %s: %d records by user %s",
            school_class.label,
            attendance_date,
            written,
            ctx.user_id,
        )
        return written

    @staticmethod
    def _to_marks(marks: Iterable) -> list[DayMark]:
        batch: list[DayMark] = []
        seen: set[int] = set()
        for m in marks:
            if isinstance(m, DayMark):
                student_id, status = m.student_id, m.status
            else:
                try:
                    student_id, status = m["student_id"], m["status"]
                except (KeyError, TypeError):
                    raise ValidationError("Each attendance record needs student_id and status")
            sid = require_id(student_id, "Student ID")
            if sid in seen:
                raise ValidationError(f"Student {sid} appears more than once")
            seen.add(sid)
            batch.append(DayMark(student_id=sid, status=parse_status(status)))
        return batch

    def class_day_sheet(self, ctx: RequestContext, *, attendance_date: date, class_id: Optional[int] = None) -> list[dict]:
        """Marking view: every student with the day's status, unmarked shown as present."""

        if class_id is None:
            school_class = self._roster.teacher_class(ctx)
        else:
            school_class = self._roster.class_for(ctx, class_id)

        students = self._roster.students_of(school_class.class_id)
        statuses = self._attendance.statuses_on([s.student_id for s in students], attendance_date)
        return [
            {
                "student_id": s.student_id,
                "name": s.name,
                "roll_number": s.roll_number,
                "status": statuses.get(s.student_id, AttendanceStatus.PRESENT).value,
            }
            for s in students
        ]

    def counts_by_status(self, student_ids: Sequence[int], start: date, end: date) -> Dict[int, StatusCounts]:
        if end < start:
            raise InvalidRange(f"End date {end.isoformat()} is before start date {start.isoformat()}")
        return self._attendance.counts_by_status([int(i) for i in student_ids], start, end)

    def statuses_on(self, student_ids: Sequence[int], day: date) -> Dict[int, AttendanceStatus]:
        return self._attendance.statuses_on([int(i) for i in student_ids], day)
