from __future__ import annotations

from datetime import date, timedelta

from ...core.constants import ADMIN_EDIT_WINDOW_DAYS
from ...core.exceptions import WindowExceeded
from .base import MarkingPolicy


class TrailingWindowPolicy(MarkingPolicy):
    """Administrative override: any day in the last `days` days, today included."""

    def __init__(self, days: int = ADMIN_EDIT_WINDOW_DAYS):
        if days < 1:
            raise ValueError("days must be >= 1")
        self._days = int(days)

    def earliest(self, today: date) -> date:
        return today - timedelta(days=self._days - 1)

    def check_past(self, *, target: date, today: date) -> None:
        if target < self.earliest(today):
            raise WindowExceeded(f"Cannot edit attendance older than {self._days} days")
