from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ...core.exceptions import FutureDate


class MarkingPolicy(ABC):
    """Strategy Pattern: which dates a caller may mark attendance for."""

    def check(self, *, target: date, today: date) -> None:
        if target > today:
            raise FutureDate("Cannot mark attendance for a future date")
        self.check_past(target=target, today=today)

    @abstractmethod
    def check_past(self, *, target: date, today: date) -> None:
        raise NotImplementedError
