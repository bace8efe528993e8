from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MessageStatus


@dataclass(frozen=True)
class SendResult:
    success: bool
    error: Optional[str] = None
    message_id: Optional[str] = None


@dataclass(frozen=True)
class Notice:
    subject: str
    text: str
    html: str


@dataclass(frozen=True)
class NoticeTarget:
    """A student as seen by the dispatcher: who to write to and who may ask."""

    student_id: int
    name: str
    parent_email: Optional[str]
    teacher_id: Optional[int]
    school_id: int


@dataclass(frozen=True)
class AbsentStudent:
    student_id: int
    name: str
    roll_number: str
    parent_email: Optional[str]
    parent_contact: Optional[str]
    standard: int
    section: str
    message_sent: bool


@dataclass(frozen=True)
class MessageLogEntry:
    message_id: int
    student_id: int
    student_name: str
    roll_number: str
    standard: int
    section: str
    recipient: str
    subject: Optional[str]
    status: MessageStatus
    attendance_date: date
    sent_at: datetime
    error_message: Optional[str] = None
    sent_by_name: Optional[str] = None
