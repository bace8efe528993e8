from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..classes.service import RosterService
from ..common.validators import optional_id, require_ids
from ..core.constants import MESSAGE_HISTORY_LIMIT
from ..core.context import RequestContext
from ..core.enums import MessageStatus
from ..core.exceptions import AuthorizationError, ValidationError
from .adapter import NotificationSender
from .model import NoticeTarget, SendResult
from .repository import MessageLogRepository
from .templates import DEFAULT_SCHOOL_LABEL, absence_notice

logger = logging.getLogger(__name__)


class NotificationService:
    """Absence notices to parents.

    Delivery failures are data: each attempt is logged and reported, none aborts the batch.
    """

    def __init__(self, messages: MessageLogRepository, sender: NotificationSender, roster: RosterService):
        self._messages = messages
        self._sender = sender
        self._roster = roster

    def absent_students(self, ctx: RequestContext, *, day: Optional[date], class_id: Optional[int] = None) -> dict:
        if not day:
            raise ValidationError("Date is required")

        if ctx.is_admin:
            if class_id is not None:
                class_id = self._roster.class_for(ctx, class_id).class_id
            rows = self._messages.absent_students(school_id=ctx.school_id, attendance_date=day, class_id=class_id)
        else:
            rows = self._messages.absent_students(school_id=ctx.school_id, attendance_date=day, teacher_id=ctx.user_id)

        return {
            "date": day.isoformat(),
            "count": len(rows),
            "students": [
                {
                    "id": r.student_id,
                    "name": r.name,
                    "roll_number": r.roll_number,
                    "parent_email": r.parent_email,
                    "parent_contact": r.parent_contact,
                    "standard": r.standard,
                    "section": r.section,
                    "message_sent": r.message_sent,
                }
                for r in rows
            ],
        }

    def send_absence_notices(self, ctx: RequestContext, *, student_ids: Optional[Iterable], day: Optional[date]) -> dict:
        ids = require_ids(student_ids, "Student IDs")
        if not day:
            raise ValidationError("Date is required")

        targets = {t.student_id: t for t in self._messages.notice_targets(ids)}
        if any(t.school_id != ctx.school_id for t in targets.values()):
            raise AuthorizationError("You can only send messages to students in your school")
        if not ctx.is_admin and any(t.teacher_id != ctx.user_id for t in targets.values()):
            raise AuthorizationError("You can only send messages to students in your class")

        school_label = self._messages.school_name(ctx.school_id) or DEFAULT_SCHOOL_LABEL
        results = {"total": len(ids), "sent": 0, "failed": 0, "errors": []}

        for student_id in ids:
            target = targets.get(student_id)
            if target is None:
                error, name = "Student not found", None
            elif not target.parent_email:
                error, name = "No parent email address provided", target.name
            else:
                outcome = self._deliver(ctx, target, day, school_label)
                if outcome.success:
                    results["sent"] += 1
                    continue
                error, name = outcome.error or "Delivery failed", target.name

            results["failed"] += 1
            results["errors"].append({"student_id": student_id, "student_name": name, "error": error})

        logger.info(
            "Absence notices for %s by user %s: %d sent, %d failed",
            day.isoformat(),
            ctx.user_id,
            results["sent"],
            results["failed"],
        )
        return {
            "success": True,
            "message": f"Sent {results['sent']} out of {results['total']} notifications",
            "results": results,
        }

    def _deliver(self, ctx: RequestContext, target: NoticeTarget, day: date, school_label: str) -> SendResult:
        try:
            outcome = self._sender.send(
                target.student_id,
                target.parent_email,
                day,
                school_label,
                student_name=target.name,
            )
        except Exception as e:
            logger.exception("Notification sender raised for student %s", target.student_id)
            outcome = SendResult(success=False, error=str(e))

        notice = absence_notice(target.name, day, school_label)
        self._messages.log(
            student_id=target.student_id,
            recipient=target.parent_email,
            subject=notice.subject,
            content=notice.text,
            status=MessageStatus.SENT if outcome.success else MessageStatus.FAILED,
            sent_by=ctx.user_id,
            attendance_date=day,
            error_message=outcome.error,
        )
        return outcome

    def message_history(
        self,
        ctx: RequestContext,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        student_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> dict:
        try:
            st = MessageStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Invalid message status: {status!r}")

        rows = self._messages.history(
            school_id=ctx.school_id,
            teacher_id=None if ctx.is_admin else ctx.user_id,
            start_date=start,
            end_date=end,
            student_id=optional_id(student_id, "Student ID"),
            status=st,
            limit=MESSAGE_HISTORY_LIMIT,
        )
        return {
            "count": len(rows),
            "messages": [
                {
                    "id": m.message_id,
                    "student_id": m.student_id,
                    "student_name": m.student_name,
                    "roll_number": m.roll_number,
                    "standard": m.standard,
                    "section": m.section,
                    "recipient": m.recipient,
                    "subject": m.subject,
                    "status": m.status.value,
                    "attendance_date": m.attendance_date.isoformat(),
                    "sent_at": m.sent_at.isoformat(),
                    "error_message": m.error_message,
                    "sent_by_name": m.sent_by_name,
                }
                for m in rows
            ],
        }
