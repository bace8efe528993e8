from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.academic_year import AcademicYear
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count_in_range(
        self,
        *,
        academic_year: AcademicYear,
        start_date: date,
        end_date: date,
        school_id: Optional[int] = None,
    ) -> int:
        clauses = ["academic_year=%s", "holiday_date BETWEEN %s AND %s"]
        params: list[object] = [str(academic_year), start_date, end_date]
        if school_id is not None:
            clauses.append("school_id=%s")
            params.append(int(school_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM holidays WHERE {' AND '.join(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_for_school(self, school_id: int, *, academic_year: Optional[AcademicYear] = None) -> Sequence[Holiday]:
        sql = "SELECT id, school_id, holiday_date, description, academic_year FROM holidays WHERE school_id=%s"
        params: list[object] = [int(school_id)]
        if academic_year is not None:
            sql += " AND academic_year=%s"
            params.append(str(academic_year))
        sql += " ORDER BY holiday_date"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                Holiday(
                    holiday_id=int(r["id"]),
                    school_id=int(r["school_id"]),
                    holiday_date=r["holiday_date"],
                    description=r["description"],
                    academic_year=AcademicYear.parse(r["academic_year"]),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, school_id: int, holiday_date: date, description: str, academic_year: AcademicYear) -> int:
        with unique_violation_as_conflict("Holiday already exists for this date and year"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO holidays(school_id, holiday_date, description, academic_year)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(school_id), holiday_date, description, str(academic_year)),
                )
                return int(cur.lastrowid)

    def delete(self, *, holiday_id: int, school_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE id=%s AND school_id=%s", (int(holiday_id), int(school_id)))
            return cur.rowcount > 0
