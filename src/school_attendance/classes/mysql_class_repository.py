from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..common.academic_year import AcademicYear
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import ClassKey, SchoolClass
from .repository import ClassRepository

_COLUMNS = "id, school_id, standard, section, academic_year, teacher_id"


def row_to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["id"]),
        school_id=int(r["school_id"]),
        standard=int(r["standard"]),
        section=r["section"],
        academic_year=AcademicYear.parse(r["academic_year"]),
        teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
    )


def _class_conflict(e: mysql.connector.IntegrityError) -> ConflictError:
    # uq_class_teacher vs uq_class_key
    if "teacher" in str(e.msg):
        return ConflictError("This teacher is already assigned to another class")
    return ConflictError("Class already exists for this academic year")


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE id=%s", (int(class_id),))
            r = fetchone(cur)
            return row_to_class(r) if r else None

    def get_for_teacher(self, teacher_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE teacher_id=%s", (int(teacher_id),))
            r = fetchone(cur)
            return row_to_class(r) if r else None

    def create(self, key: ClassKey, *, teacher_id: Optional[int] = None) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO classes(school_id, standard, section, academic_year, teacher_id)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (key.school_id, key.standard, key.section, str(key.academic_year), teacher_id),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            raise _class_conflict(e) from e

    def update(self, class_id: int, key: ClassKey, *, teacher_id: Optional[int] = None) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE classes
                    SET standard=%s, section=%s, academic_year=%s, teacher_id=%s
                    WHERE id=%s AND school_id=%s
                    """,
                    (key.standard, key.section, str(key.academic_year), teacher_id, int(class_id), key.school_id),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            raise _class_conflict(e) from e

    def delete(self, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE id=%s", (int(class_id),))
            return cur.rowcount > 0

    def list_for_school(self, school_id: int) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM classes
                WHERE school_id=%s
                ORDER BY academic_year DESC, standard, section
                """,
                (int(school_id),),
            )
            return [row_to_class(r) for r in fetchall(cur)]
