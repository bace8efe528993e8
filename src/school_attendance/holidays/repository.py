from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..common.academic_year import AcademicYear
from .model import Holiday


class HolidayRepository(Protocol):
    def count_in_range(
        self,
        *,
        academic_year: AcademicYear,
        start_date: date,
        end_date: date,
        school_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_school(self, school_id: int, *, academic_year: Optional[AcademicYear] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, school_id: int, holiday_date: date, description: str, academic_year: AcademicYear) -> int:
        """Insert a holiday; raises ConflictError if the date is already declared."""

        raise NotImplementedError

    def delete(self, *, holiday_id: int, school_id: int) -> bool:
        raise NotImplementedError
