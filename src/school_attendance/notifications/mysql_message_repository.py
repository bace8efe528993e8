from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import MessageStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import AbsentStudent, MessageLogEntry, NoticeTarget
from .repository import MessageLogRepository


class MySQLMessageLogRepository(MessageLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def school_name(self, school_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT school_name FROM schools WHERE id=%s", (int(school_id),))
            r = fetchone(cur)
            return r["school_name"] if r else None

    def notice_targets(self, student_ids: Sequence[int]) -> Sequence[NoticeTarget]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.id, s.name, s.parent_email, c.teacher_id, c.school_id
                FROM students s
                JOIN classes c ON c.id = s.class_id
                WHERE s.id IN ({placeholders(len(ids))})
                """,
                tuple(ids),
            )
            return [
                NoticeTarget(
                    student_id=int(r["id"]),
                    name=r["name"],
                    parent_email=r.get("parent_email"),
                    teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
                    school_id=int(r["school_id"]),
                )
                for r in fetchall(cur)
            ]

    def absent_students(
        self,
        *,
        school_id: int,
        attendance_date: date,
        class_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> Sequence[AbsentStudent]:
        clauses = ["ar.status='absent'", "c.school_id=%s"]
        params: list[object] = [attendance_date, int(school_id)]
        if teacher_id is not None:
            clauses.append("c.teacher_id=%s")
            params.append(int(teacher_id))
        elif class_id is not None:
            clauses.append("c.id=%s")
            params.append(int(class_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.id, s.name, s.roll_number, s.parent_email, s.parent_contact,
                    c.standard, c.section,
                    EXISTS(
                        SELECT 1 FROM message_logs ml
                        WHERE ml.student_id = s.id AND ml.attendance_date = ar.attendance_date
                    ) AS message_sent
                FROM students s
                JOIN classes c ON c.id = s.class_id
                JOIN attendance_records ar ON ar.student_id = s.id AND ar.attendance_date = %s
                WHERE {" AND ".join(clauses)}
                ORDER BY CAST(s.roll_number AS UNSIGNED), s.roll_number
                """,
                tuple(params),
            )
            return [
                AbsentStudent(
                    student_id=int(r["id"]),
                    name=r["name"],
                    roll_number=str(r["roll_number"]),
                    parent_email=r.get("parent_email"),
                    parent_contact=r.get("parent_contact"),
                    standard=int(r["standard"]),
                    section=r["section"],
                    message_sent=bool(r["message_sent"]),
                )
                for r in fetchall(cur)
            ]

    def log(
        self,
        *,
        student_id: int,
        recipient: str,
        subject: Optional[str],
        content: Optional[str],
        status: MessageStatus,
        sent_by: int,
        attendance_date: date,
        error_message: Optional[str] = None,
        message_type: str = "email",
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO message_logs(
                    student_id, message_type, recipient, subject, message_content,
                    status, sent_by, attendance_date, error_message
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    message_type,
                    recipient,
                    subject,
                    content,
                    status.value,
                    int(sent_by),
                    attendance_date,
                    error_message,
                ),
            )
            return int(cur.lastrowid)

    def history(
        self,
        *,
        school_id: int,
        teacher_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[int] = None,
        status: Optional[MessageStatus] = None,
        limit: int = 100,
    ) -> Sequence[MessageLogEntry]:
        clauses = ["c.school_id=%s"]
        params: list[object] = [int(school_id)]

        if teacher_id is not None:
            clauses.append("(ml.sent_by=%s OR c.teacher_id=%s)")
            params.extend([int(teacher_id), int(teacher_id)])
        if start_date is not None:
            clauses.append("ml.attendance_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ml.attendance_date <= %s")
            params.append(end_date)
        if student_id is not None:
            clauses.append("ml.student_id=%s")
            params.append(int(student_id))
        if status is not None:
            clauses.append("ml.status=%s")
            params.append(status.value)

        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ml.id, ml.student_id, ml.recipient, ml.subject, ml.status,
                    ml.attendance_date, ml.sent_at, ml.error_message,
                    s.name AS student_name, s.roll_number,
                    c.standard, c.section,
                    u.full_name AS sent_by_name
                FROM message_logs ml
                JOIN students s ON s.id = ml.student_id
                JOIN classes c ON c.id = s.class_id
                LEFT JOIN users u ON u.id = ml.sent_by
                WHERE {" AND ".join(clauses)}
                ORDER BY ml.sent_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                MessageLogEntry(
                    message_id=int(r["id"]),
                    student_id=int(r["student_id"]),
                    student_name=r["student_name"],
                    roll_number=str(r["roll_number"]),
                    standard=int(r["standard"]),
                    section=r["section"],
                    recipient=r["recipient"],
                    subject=r.get("subject"),
                    status=MessageStatus(r["status"]),
                    attendance_date=r["attendance_date"],
                    sent_at=r["sent_at"],
                    error_message=r.get("error_message"),
                    sent_by_name=r.get("sent_by_name"),
                )
                for r in fetchall(cur)
            ]
