from __future__ import annotations

from datetime import date

from ...core.exceptions import WindowExceeded
from .base import MarkingPolicy


class TodayOnlyPolicy(MarkingPolicy):
    """Class teachers mark the current day only."""

    def check_past(self, *, target: date, today: date) -> None:
        if target != today:
            raise WindowExceeded("You can only mark attendance for today")
