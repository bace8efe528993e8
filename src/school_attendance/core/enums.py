from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for access scoping."""

    ADMIN = "admin"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class MessageStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
