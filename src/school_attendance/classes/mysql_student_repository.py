from __future__ import annotations

from typing import Optional, Sequence

from ..common.academic_year import AcademicYear
from ..core.enums import Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import NewStudent, Student
from .repository import StudentRepository

_COLUMNS = (
    "s.id, s.roll_number, s.name, s.class_id, s.academic_year, s.gender, "
    "s.parent_email, s.parent_contact, s.admission_no"
)
_ORDER = "CAST(s.roll_number AS UNSIGNED), s.roll_number"


def row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["id"]),
        roll_number=str(r["roll_number"]),
        name=r["name"],
        class_id=int(r["class_id"]),
        academic_year=AcademicYear.parse(r["academic_year"]),
        gender=Gender(r["gender"]),
        parent_email=r.get("parent_email"),
        parent_contact=r.get("parent_contact"),
        admission_no=r.get("admission_no"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students s WHERE s.id=%s", (int(student_id),))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def list_for_class(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students s WHERE s.class_id=%s ORDER BY {_ORDER}",
                (int(class_id),),
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def list_for_school(
        self,
        school_id: int,
        *,
        academic_year: Optional[AcademicYear] = None,
        class_id: Optional[int] = None,
    ) -> Sequence[Student]:
        clauses = ["c.school_id=%s"]
        params: list[object] = [int(school_id)]

        if academic_year is not None:
            clauses.append("s.academic_year=%s")
            params.append(str(academic_year))
        if class_id is not None:
            clauses.append("s.class_id=%s")
            params.append(int(class_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students s
                JOIN classes c ON c.id = s.class_id
                WHERE {where}
                ORDER BY c.standard, c.section, {_ORDER}
                """,
                tuple(params),
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def create(self, student: NewStudent) -> int:
        with unique_violation_as_conflict("Roll number already exists for this class and year"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(
                        roll_number, admission_no, name, class_id, academic_year,
                        gender, parent_contact, parent_email
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        student.roll_number,
                        student.admission_no,
                        student.name,
                        student.class_id,
                        str(student.academic_year),
                        student.gender.value,
                        student.parent_contact,
                        student.parent_email,
                    ),
                )
                return int(cur.lastrowid)

    def update(self, student_id: int, student: NewStudent) -> bool:
        with unique_violation_as_conflict("Roll number already exists for this class and year"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE students
                    SET roll_number=%s, admission_no=%s, name=%s, class_id=%s, academic_year=%s,
                        gender=%s, parent_contact=%s, parent_email=%s
                    WHERE id=%s
                    """,
                    (
                        student.roll_number,
                        student.admission_no,
                        student.name,
                        student.class_id,
                        str(student.academic_year),
                        student.gender.value,
                        student.parent_contact,
                        student.parent_email,
                        int(student_id),
                    ),
                )
                return cur.rowcount > 0

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            return cur.rowcount > 0

    def delete_for_year(self, school_id: int, academic_year: AcademicYear) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE s FROM students s
                JOIN classes c ON c.id = s.class_id
                WHERE c.school_id=%s AND s.academic_year=%s
                """,
                (int(school_id), str(academic_year)),
            )
            return int(cur.rowcount)
