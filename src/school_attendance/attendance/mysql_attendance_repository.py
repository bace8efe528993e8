from __future__ import annotations

from datetime import date
from typing import Dict, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import UnauthorizedMembership
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from .model import DayMark, StatusCounts
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, student_id: int, attendance_date: date, status: AttendanceStatus, marked_by: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, attendance_date, status, marked_by)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), marked_by=VALUES(marked_by)
                """,
                (int(student_id), attendance_date, status.value, int(marked_by)),
            )

    def replace_class_day(
        self,
        *,
        class_id: int,
        attendance_date: date,
        marks: Sequence[DayMark],
        marked_by: int,
    ) -> int:
        ids = [m.student_id for m in marks]

        with db_cursor(self._conn_factory) as (_, cur):
            if ids:
                cur.execute(
                    f"""
                    SELECT id FROM students
                    WHERE class_id=%s AND id IN ({placeholders(len(ids))})
                    FOR UPDATE
                    """,
                    (int(class_id), *ids),
                )
                members = {int(r["id"]) for r in fetchall(cur)}
                outsiders = [i for i in ids if i not in members]
                if outsiders:
                    raise UnauthorizedMembership(f"Student {outsiders[0]} not found in this class")

            cur.execute(
                """
                DELETE ar FROM attendance_records ar
                JOIN students s ON s.id = ar.student_id
                WHERE s.class_id=%s AND ar.attendance_date=%s
                """,
                (int(class_id), attendance_date),
            )
            if ids:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(student_id, attendance_date, status, marked_by)
                    VALUES(%s,%s,%s,%s)
                    """,
                    [(m.student_id, attendance_date, m.status.value, int(marked_by)) for m in marks],
                )
            return len(ids)

    def counts_by_status(
        self,
        student_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Dict[int, StatusCounts]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return {}

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, status, COUNT(*) AS n
                FROM attendance_records
                WHERE student_id IN ({placeholders(len(ids))}) AND attendance_date BETWEEN %s AND %s
                GROUP BY student_id, status
                """,
                (*ids, start_date, end_date),
            )
            grouped: dict[int, list[tuple[str, int]]] = {i: [] for i in ids}
            for r in fetchall(cur):
                grouped[int(r["student_id"])].append((r["status"], int(r["n"])))

        return {sid: StatusCounts.from_rows(rows) for sid, rows in grouped.items()}

    def statuses_on(self, student_ids: Sequence[int], attendance_date: date) -> Dict[int, AttendanceStatus]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return {}

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, status
                FROM attendance_records
                WHERE attendance_date=%s AND student_id IN ({placeholders(len(ids))})
                """,
                (attendance_date, *ids),
            )
            return {int(r["student_id"]): AttendanceStatus(r["status"]) for r in fetchall(cur)}
