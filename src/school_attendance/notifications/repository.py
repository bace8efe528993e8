from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import MessageStatus
from .model import AbsentStudent, MessageLogEntry, NoticeTarget


class MessageLogRepository(Protocol):
    def school_name(self, school_id: int) -> Optional[str]:
        raise NotImplementedError

    def notice_targets(self, student_ids: Sequence[int]) -> Sequence[NoticeTarget]:
        raise NotImplementedError

    def absent_students(
        self,
        *,
        school_id: int,
        attendance_date: date,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[AbsentStudent]:
        raise NotImplementedError

    def log(
        self,
        *,
        student_id: int,
        recipient: str,
        subject: Optional[str],
        content: Optional[str],
        status: MessageStatus,
        sent_by: int,
        attendance_date: date,
        error_message: Optional[str] = None,
        message_type: str = "email",
    ) -> int:
        raise NotImplementedError

    def history(
        self,
        *,
        school_id: int,
        teacher_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[int] = None,
        status: Optional[MessageStatus] = None,
        limit: int = 100,
    ) -> Sequence[MessageLogEntry]:
        """Newest first. With teacher_id: messages they sent or about their class."""

        raise NotImplementedError
