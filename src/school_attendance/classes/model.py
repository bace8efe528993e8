from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.academic_year import AcademicYear
from ..core.enums import Gender


@dataclass(frozen=True)
class ClassKey:
    """Natural key of a class; unique per school."""

    standard: int
    section: str
    academic_year: AcademicYear
    school_id: int

    @property
    def label(self) -> str:
        return f"{self.standard}{self.section}"


@dataclass(frozen=True)
class SchoolClass:
    class_id: int
    school_id: int
    standard: int
    section: str
    academic_year: AcademicYear
    teacher_id: Optional[int] = None

    @property
    def label(self) -> str:
        return f"{self.standard}{self.section}"


@dataclass(frozen=True)
class Student:
    student_id: int
    roll_number: str
    name: str
    class_id: int
    academic_year: AcademicYear
    gender: Gender
    parent_email: Optional[str] = None
    parent_contact: Optional[str] = None
    admission_no: Optional[str] = None


@dataclass(frozen=True)
class NewStudent:
    roll_number: str
    name: str
    class_id: int
    academic_year: AcademicYear
    gender: Gender
    parent_email: str
    parent_contact: Optional[str] = None
    admission_no: Optional[str] = None
