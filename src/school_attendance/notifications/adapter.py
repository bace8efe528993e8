from __future__ import annotations

from datetime import date
from typing import Protocol

from .model import SendResult


class NotificationSender(Protocol):
    """Delivery boundary. Implementations report failures in the result, never raise."""

    def send(
        self,
        student_id: int,
        recipient: str,
        absence_date: date,
        school_label: str,
        *,
        student_name: str = "",
    ) -> SendResult:
        raise NotImplementedError
