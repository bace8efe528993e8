from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.academic_year import AcademicYear
from .model import ClassKey, NewStudent, SchoolClass, Student


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def get_for_teacher(self, teacher_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create(self, key: ClassKey, *, teacher_id: Optional[int] = None) -> int:
        """Insert a class; raises ConflictError on a duplicate key or teacher."""

        raise NotImplementedError

    def update(self, class_id: int, key: ClassKey, *, teacher_id: Optional[int] = None) -> bool:
        """Rewrite a class of ``key.school_id``; False when no such row.

        Raises ConflictError on a duplicate key or teacher, like ``create``.
        """

        raise NotImplementedError

    def delete(self, class_id: int) -> bool:
        raise NotImplementedError

    def list_for_school(self, school_id: int) -> Sequence[SchoolClass]:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_for_class(self, class_id: int) -> Sequence[Student]:
        """Students of a class ordered by roll number."""

        raise NotImplementedError

    def list_for_school(
        self,
        school_id: int,
        *,
        academic_year: Optional[AcademicYear] = None,
        class_id: Optional[int] = None,
    ) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, student: NewStudent) -> int:
        """Insert a student; raises ConflictError on a duplicate roll number."""

        raise NotImplementedError

    def update(self, student_id: int, student: NewStudent) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError

    def delete_for_year(self, school_id: int, academic_year: AcademicYear) -> int:
        """Remove every student of the school enrolled in ``academic_year``; returns the count."""

        raise NotImplementedError
