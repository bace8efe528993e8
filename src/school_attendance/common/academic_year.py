from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Tuple, Union

from ..core.constants import DEFAULT_ACADEMIC_YEAR_START_MONTH
from ..core.exceptions import InvalidYearFormat

_YEAR_RE = re.compile(r"^(\d{4})-(\d{4})$")


@dataclass(frozen=True, order=True)
class AcademicYear:
    """Academic year token "YYYY-YYYY" parsed into its two years.

    Parse once where the value enters the system (request, database row) and pass
    the value type around; downstream code never splits strings.
    """

    start_year: int
    end_year: int

    @classmethod
    def parse(cls, value: Union[str, "AcademicYear"]) -> "AcademicYear":
        if isinstance(value, AcademicYear):
            return value

        m = _YEAR_RE.match(value.strip()) if isinstance(value, str) else None
        if not m:
            raise InvalidYearFormat(f"Invalid academic year format: {value!r} (expected YYYY-YYYY)")

        start, end = int(m.group(1)), int(m.group(2))
        if end != start + 1:
            raise InvalidYearFormat(f"Invalid academic year format: {value!r} (years must be consecutive)")
        return cls(start, end)

    def next(self) -> "AcademicYear":
        return AcademicYear(self.start_year + 1, self.start_year + 2)

    def first_day(self, start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH) -> date:
        return date(self.start_year, start_month, 1)

    def last_day(self, start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH) -> date:
        return date(self.start_year + 1, start_month, 1) - timedelta(days=1)

    def contains(self, day: date, start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH) -> bool:
        return self.first_day(start_month) <= day <= self.last_day(start_month)

    def months(self, start_month: int = DEFAULT_ACADEMIC_YEAR_START_MONTH) -> Iterator[Tuple[int, int]]:
        """Yield (year, month) for the twelve months of the year, in order."""

        for offset in range(12):
            month = start_month + offset
            year = self.start_year + (month - 1) // 12
            yield year, (month - 1) % 12 + 1

    def __str__(self) -> str:
        return f"{self.start_year}-{self.end_year}"
