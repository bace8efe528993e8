from __future__ import annotations

from typing import Sequence

import mysql.connector

from ..classes.model import ClassKey, SchoolClass
from ..core.exceptions import ConcurrentUpdate, ConflictError, UnauthorizedMembership
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_deadlock, is_duplicate_key, placeholders
from .model import PromotionOutcome
from .repository import PromotionRepository


class MySQLPromotionRepository(PromotionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def promote(
        self,
        *,
        source: SchoolClass,
        destination: ClassKey,
        student_ids: Sequence[int],
    ) -> PromotionOutcome:
        ids = [int(i) for i in student_ids]
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                dest_id, created = self._fetch_or_create(cur, destination)

                cur.execute(
                    f"""
                    SELECT s.id
                    FROM students s
                    JOIN classes c ON c.id = s.class_id
                    WHERE s.id IN ({placeholders(len(ids))}) AND s.class_id=%s AND c.school_id=%s
                    FOR UPDATE
                    """,
                    (*ids, source.class_id, source.school_id),
                )
                if len(fetchall(cur)) != len(ids):
                    raise UnauthorizedMembership("Some students do not belong to the selected class")

                try:
                    cur.execute(
                        f"UPDATE students SET class_id=%s, academic_year=%s WHERE id IN ({placeholders(len(ids))})",
                        (dest_id, str(destination.academic_year), *ids),
                    )
                except mysql.connector.IntegrityError as e:
                    if not is_duplicate_key(e):
                        raise
                    # uq_student_roll: a promoted roll number is already taken in the destination
                    raise ConflictError(
                        f"Roll number already exists in class {destination.label} ({destination.academic_year})"
                    ) from e
                return PromotionOutcome(destination_class_id=dest_id, created_destination=created, moved=len(ids))
        except mysql.connector.Error as e:
            if is_deadlock(e):
                raise ConcurrentUpdate(
                    f"Concurrent update on class {destination.label} ({destination.academic_year})"
                ) from e
            raise

    @staticmethod
    def _fetch_or_create(cur, key: ClassKey) -> tuple[int, bool]:
        params = (key.standard, key.section, str(key.academic_year), key.school_id)
        cur.execute(
            """
            SELECT id FROM classes
            WHERE standard=%s AND section=%s AND academic_year=%s AND school_id=%s
            FOR UPDATE
            """,
            params,
        )
        r = fetchone(cur)
        if r:
            return int(r["id"]), False

        try:
            cur.execute(
                "INSERT INTO classes(standard, section, academic_year, school_id, teacher_id) VALUES(%s,%s,%s,%s,NULL)",
                params,
            )
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            # uq_class_key: another promotion created the destination first
            raise ConcurrentUpdate(f"Class {key.label} ({key.academic_year}) was created concurrently") from e
        return int(cur.lastrowid), True
