from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.academic_year import AcademicYear
from ..common.validators import (
    optional_id,
    optional_mobile,
    optional_text,
    require_email,
    require_gender,
    require_id,
    require_non_empty,
)
from ..core.constants import MIN_STANDARD, TERMINAL_STANDARD
from ..core.context import RequestContext
from ..core.exceptions import AuthorizationError, ClassNotFound, ConflictError, NotFoundError, ValidationError
from .model import ClassKey, NewStudent, SchoolClass, Student
from .repository import ClassRepository, StudentRepository

logger = logging.getLogger(__name__)


def class_to_dict(c: SchoolClass) -> dict:
    return {
        "id": c.class_id,
        "standard": c.standard,
        "section": c.section,
        "academic_year": str(c.academic_year),
        "teacher_id": c.teacher_id,
    }


def student_to_dict(s: Student) -> dict:
    return {
        "id": s.student_id,
        "roll_number": s.roll_number,
        "admission_no": s.admission_no,
        "name": s.name,
        "class_id": s.class_id,
        "academic_year": str(s.academic_year),
        "gender": s.gender.value,
        "parent_contact": s.parent_contact,
        "parent_email": s.parent_email,
    }


class RosterService:
    """Classes and students, plus the access rules other services reuse.

    Admins see every class of their school; teachers see only their own class.
    """

    def __init__(self, classes: ClassRepository, students: StudentRepository):
        self._classes = classes
        self._students = students

    # -- access helpers -------------------------------------------------

    def class_for(self, ctx: RequestContext, class_id: int) -> SchoolClass:
        c = self._classes.get_by_id(require_id(class_id, "Class ID"))
        if not c:
            raise ClassNotFound("Class not found")
        if c.school_id != ctx.school_id:
            raise AuthorizationError("You can only access classes of your school")
        if not ctx.is_admin and c.teacher_id != ctx.user_id:
            raise AuthorizationError("You can only access your own class")
        return c

    def student_for(self, ctx: RequestContext, student_id: int) -> tuple[Student, SchoolClass]:
        s = self._students.get_by_id(require_id(student_id, "Student ID"))
        if not s:
            raise NotFoundError("Student not found")
        c = self._classes.get_by_id(s.class_id)
        if not c:
            raise NotFoundError("Student not found")
        if c.school_id != ctx.school_id:
            raise AuthorizationError("You can only access students of your school")
        if not ctx.is_admin and c.teacher_id != ctx.user_id:
            raise AuthorizationError("You can only access students in your class")
        return s, c

    def students_of(self, class_id: int) -> Sequence[Student]:
        return self._students.list_for_class(int(class_id))

    # -- classes ----------------------------------------------------------

    def teacher_class(self, ctx: RequestContext) -> SchoolClass:
        c = self._classes.get_for_teacher(ctx.user_id)
        if not c or c.school_id != ctx.school_id:
            raise NotFoundError("No class assigned to you")
        return c

    def list_classes(self, ctx: RequestContext) -> list[dict]:
        return [class_to_dict(c) for c in self._classes.list_for_school(ctx.school_id)]

    @staticmethod
    def _require_admin(ctx: RequestContext, action: str) -> None:
        if not ctx.is_admin:
            raise AuthorizationError(f"Only admins can {action}")

    @staticmethod
    def _class_key(ctx: RequestContext, standard, section, academic_year) -> ClassKey:
        if standard in (None, "") or not section or not academic_year:
            raise ValidationError("Standard, section, and academic year are required")
        if isinstance(standard, bool):
            raise ValidationError("Standard must be a number")
        try:
            std = int(standard)
        except (TypeError, ValueError):
            raise ValidationError("Standard must be a number")
        if not MIN_STANDARD <= std <= TERMINAL_STANDARD:
            raise ValidationError(f"Standard must be between {MIN_STANDARD} and {TERMINAL_STANDARD}")

        return ClassKey(
            standard=std,
            section=require_non_empty(section, "Section").upper(),
            academic_year=AcademicYear.parse(academic_year),
            school_id=ctx.school_id,
        )

    def add_class(
        self,
        ctx: RequestContext,
        *,
        standard,
        section: str,
        academic_year: str,
        teacher_id: Optional[int] = None,
    ) -> int:
        self._require_admin(ctx, "add classes")
        key = self._class_key(ctx, standard, section, academic_year)

        class_id = self._classes.create(key, teacher_id=optional_id(teacher_id, "Teacher ID"))
        logger.info("Class %s (%s) created as id=%s by user %s", key.label, key.academic_year, class_id, ctx.user_id)
        return class_id

    def update_class(
        self,
        ctx: RequestContext,
        class_id: int,
        *,
        standard,
        section: str,
        academic_year: str,
        teacher_id: Optional[int] = None,
    ) -> None:
        self._require_admin(ctx, "edit classes")
        current = self.class_for(ctx, class_id)
        key = self._class_key(ctx, standard, section, academic_year)

        if not self._classes.update(current.class_id, key, teacher_id=optional_id(teacher_id, "Teacher ID")):
            raise ClassNotFound("Class not found")
        logger.info("Class id=%s updated to %s (%s) by user %s", current.class_id, key.label, key.academic_year, ctx.user_id)

    def delete_class(self, ctx: RequestContext, class_id: int) -> None:
        self._require_admin(ctx, "delete classes")
        current = self.class_for(ctx, class_id)
        if self._students.list_for_class(current.class_id):
            raise ConflictError("Class still has students; move or delete them first")

        if not self._classes.delete(current.class_id):
            raise ClassNotFound("Class not found")
        logger.info("Class %s (%s) deleted by user %s", current.label, current.academic_year, ctx.user_id)

    # -- students ---------------------------------------------------------

    def list_students(
        self,
        ctx: RequestContext,
        *,
        academic_year: Optional[str] = None,
        class_id: Optional[int] = None,
    ) -> list[dict]:
        if not ctx.is_admin:
            class_id = self.teacher_class(ctx).class_id
        year = AcademicYear.parse(academic_year) if academic_year else None
        rows = self._students.list_for_school(ctx.school_id, academic_year=year, class_id=class_id)
        return [student_to_dict(s) for s in rows]

    def _enrollment(self, ctx: RequestContext, fields: dict) -> NewStudent:
        """Validate student fields and check the target class belongs to the caller's school."""

        required = ("roll_number", "name", "class_id", "academic_year", "gender", "parent_email")
        if any(fields.get(f) in (None, "") for f in required):
            raise ValidationError("Roll number, name, class, academic year, gender, and parent email are required")

        new = NewStudent(
            roll_number=require_non_empty(str(fields["roll_number"]), "Roll number"),
            name=require_non_empty(fields["name"], "Name"),
            class_id=require_id(fields["class_id"], "Class ID"),
            academic_year=AcademicYear.parse(fields["academic_year"]),
            gender=require_gender(fields["gender"]),
            parent_email=require_email(fields["parent_email"]),
            parent_contact=optional_mobile(fields.get("parent_contact")),
            admission_no=optional_text(fields.get("admission_no")),
        )
        self.class_for(ctx, new.class_id)
        return new

    def add_student(self, ctx: RequestContext, **fields) -> int:
        self._require_admin(ctx, "add students")
        new = self._enrollment(ctx, fields)

        student_id = self._students.create(new)
        logger.info("Student %s enrolled in class %s as id=%s", new.name, new.class_id, student_id)
        return student_id

    def update_student(self, ctx: RequestContext, student_id: int, **fields) -> None:
        self._require_admin(ctx, "edit students")
        student, _ = self.student_for(ctx, student_id)
        new = self._enrollment(ctx, fields)

        if not self._students.update(student.student_id, new):
            raise NotFoundError("Student not found")
        logger.info("Student id=%s updated by user %s", student.student_id, ctx.user_id)

    def delete_student(self, ctx: RequestContext, student_id: int) -> None:
        self._require_admin(ctx, "delete students")
        student, _ = self.student_for(ctx, student_id)

        if not self._students.delete(student.student_id):
            raise NotFoundError("Student not found")
        logger.info("Student id=%s deleted by user %s", student.student_id, ctx.user_id)

    def bulk_delete_students(self, ctx: RequestContext, *, academic_year: Optional[str]) -> int:
        self._require_admin(ctx, "delete students")
        if not academic_year:
            raise ValidationError("Academic year is required")
        year = AcademicYear.parse(academic_year)

        deleted = self._students.delete_for_year(ctx.school_id, year)
        logger.warning("Deleted %d students of %s for school %s by user %s", deleted, year, ctx.school_id, ctx.user_id)
        return deleted
