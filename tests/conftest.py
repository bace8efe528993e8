from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

import pytest

from school_attendance.attendance.model import StatusCounts
from school_attendance.classes.model import ClassKey, SchoolClass, Student
from school_attendance.common.academic_year import AcademicYear
from school_attendance.container import build_services
from school_attendance.core.context import RequestContext
from school_attendance.core.enums import AttendanceStatus, Gender, Role
from school_attendance.core.exceptions import ConcurrentUpdate, ConflictError, UnauthorizedMembership
from school_attendance.holidays.model import Holiday
from school_attendance.notifications.model import AbsentStudent, MessageLogEntry, NoticeTarget, SendResult
from school_attendance.promotion.model import PromotionOutcome

TODAY = date(2024, 6, 20)
SCHOOL_ID = 1
ADMIN_ID = 1
TEACHER_ID = 100


@dataclass(frozen=True)
class Mark:
    student_id: int
    attendance_date: date
    status: AttendanceStatus
    marked_by: int


@dataclass
class FixedClock:
    day: date

    def today(self) -> date:
        return self.day


class InMemoryClasses:
    def __init__(self):
        self.rows: dict[int, SchoolClass] = {}
        self._id = 0

    def add(self, standard, section, academic_year, *, school_id=SCHOOL_ID, teacher_id=None) -> SchoolClass:
        class_id = self.create(
            ClassKey(standard, section, AcademicYear.parse(academic_year), school_id), teacher_id=teacher_id
        )
        return self.rows[class_id]

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        return self.rows.get(int(class_id))

    def get_for_teacher(self, teacher_id: int) -> Optional[SchoolClass]:
        return next((c for c in self.rows.values() if c.teacher_id == teacher_id), None)

    def with_key(self, key: ClassKey) -> Optional[SchoolClass]:
        return next(
            (
                c
                for c in self.rows.values()
                if (c.standard, c.section, c.academic_year, c.school_id)
                == (key.standard, key.section, key.academic_year, key.school_id)
            ),
            None,
        )

    def _check_unique(self, key: ClassKey, teacher_id: Optional[int], *, class_id: Optional[int] = None) -> None:
        same = self.with_key(key)
        if same and same.class_id != class_id:
            raise ConflictError("Class already exists for this academic year")
        assigned = self.get_for_teacher(teacher_id) if teacher_id is not None else None
        if assigned and assigned.class_id != class_id:
            raise ConflictError("This teacher is already assigned to another class")

    def _store(self, class_id: int, key: ClassKey, teacher_id: Optional[int]) -> None:
        self.rows[class_id] = SchoolClass(
            class_id=class_id,
            school_id=key.school_id,
            standard=key.standard,
            section=key.section,
            academic_year=key.academic_year,
            teacher_id=teacher_id,
        )

    def create(self, key: ClassKey, *, teacher_id: Optional[int] = None) -> int:
        self._check_unique(key, teacher_id)
        self._id += 1
        self._store(self._id, key, teacher_id)
        return self._id

    def update(self, class_id: int, key: ClassKey, *, teacher_id: Optional[int] = None) -> bool:
        current = self.rows.get(class_id)
        if not current or current.school_id != key.school_id:
            return False
        self._check_unique(key, teacher_id, class_id=class_id)
        self._store(class_id, key, teacher_id)
        return True

    def delete(self, class_id: int) -> bool:
        return self.rows.pop(class_id, None) is not None

    def list_for_school(self, school_id: int):
        return [c for c in self.rows.values() if c.school_id == school_id]


class InMemoryStudents:
    def __init__(self, classes: InMemoryClasses):
        self._classes = classes
        self.rows: dict[int, Student] = {}
        self._id = 0

    def add(self, name, school_class: SchoolClass, *, gender=Gender.MALE, roll=None, parent_email="parent@example.com"):
        self._id += 1
        s = Student(
            student_id=self._id,
            roll_number=str(roll or self._id),
            name=name,
            class_id=school_class.class_id,
            academic_year=school_class.academic_year,
            gender=gender,
            parent_email=parent_email,
        )
        self.rows[s.student_id] = s
        return s

    def get_by_id(self, student_id: int):
        return self.rows.get(int(student_id))

    def list_for_class(self, class_id: int):
        rows = [s for s in self.rows.values() if s.class_id == class_id]
        return sorted(rows, key=lambda s: int(s.roll_number))

    def list_for_school(self, school_id, *, academic_year=None, class_id=None):
        out = []
        for s in self.rows.values():
            c = self._classes.get_by_id(s.class_id)
            if c.school_id != school_id:
                continue
            if academic_year is not None and s.academic_year != academic_year:
                continue
            if class_id is not None and s.class_id != class_id:
                continue
            out.append(s)
        return out

    def roll_taken(self, roll_number, class_id, academic_year, *, student_id=None) -> bool:
        return any(
            (s.roll_number, s.class_id, s.academic_year) == (roll_number, class_id, academic_year)
            and s.student_id != student_id
            for s in self.rows.values()
        )

    def _store(self, student_id: int, student) -> None:
        self.rows[student_id] = Student(
            student_id=student_id,
            roll_number=student.roll_number,
            name=student.name,
            class_id=student.class_id,
            academic_year=student.academic_year,
            gender=student.gender,
            parent_email=student.parent_email,
            parent_contact=student.parent_contact,
            admission_no=student.admission_no,
        )

    def create(self, student) -> int:
        if self.roll_taken(student.roll_number, student.class_id, student.academic_year):
            raise ConflictError("Roll number already exists for this class and year")
        self._id += 1
        self._store(self._id, student)
        return self._id

    def update(self, student_id: int, student) -> bool:
        if student_id not in self.rows:
            return False
        if self.roll_taken(student.roll_number, student.class_id, student.academic_year, student_id=student_id):
            raise ConflictError("Roll number already exists for this class and year")
        self._store(student_id, student)
        return True

    def delete(self, student_id: int) -> bool:
        return self.rows.pop(student_id, None) is not None

    def delete_for_year(self, school_id, academic_year) -> int:
        doomed = [s.student_id for s in self.list_for_school(school_id, academic_year=academic_year)]
        for sid in doomed:
            del self.rows[sid]
        return len(doomed)


class InMemoryHolidays:
    def __init__(self):
        self.rows: dict[int, Holiday] = {}
        self._id = 0

    def count_in_range(self, *, academic_year, start_date, end_date, school_id=None) -> int:
        return sum(
            1
            for h in self.rows.values()
            if h.academic_year == academic_year
            and start_date <= h.holiday_date <= end_date
            and (school_id is None or h.school_id == school_id)
        )

    def list_for_school(self, school_id, *, academic_year=None):
        rows = [
            h
            for h in self.rows.values()
            if h.school_id == school_id and (academic_year is None or h.academic_year == academic_year)
        ]
        return sorted(rows, key=lambda h: h.holiday_date)

    def create(self, *, school_id, holiday_date, description, academic_year) -> int:
        for h in self.rows.values():
            if (h.school_id, h.holiday_date, h.academic_year) == (school_id, holiday_date, academic_year):
                raise ConflictError("Holiday already exists for this date and year")
        self._id += 1
        self.rows[self._id] = Holiday(self._id, school_id, holiday_date, description, academic_year)
        return self._id

    def delete(self, *, holiday_id, school_id) -> bool:
        h = self.rows.get(holiday_id)
        if not h or h.school_id != school_id:
            return False
        del self.rows[holiday_id]
        return True


class InMemoryAttendance:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.records: dict[tuple[int, date], Mark] = {}

    def mark(self, student_id: int, day: date, status: AttendanceStatus) -> None:
        self.records[(student_id, day)] = Mark(student_id, day, status, ADMIN_ID)

    def record_on(self, student_id, attendance_date):
        return self.records.get((student_id, attendance_date))

    def upsert(self, *, student_id, attendance_date, status, marked_by) -> None:
        self.records[(student_id, attendance_date)] = Mark(student_id, attendance_date, status, marked_by)

    def replace_class_day(self, *, class_id, attendance_date, marks, marked_by) -> int:
        for m in marks:
            s = self._students.get_by_id(m.student_id)
            if not s or s.class_id != class_id:
                raise UnauthorizedMembership(f"Student {m.student_id} not found in this class")

        for key in [k for k in self.records if k[1] == attendance_date]:
            if self._students.get_by_id(key[0]).class_id == class_id:
                del self.records[key]
        for m in marks:
            self.upsert(student_id=m.student_id, attendance_date=attendance_date, status=m.status, marked_by=marked_by)
        return len(marks)

    def counts_by_status(self, student_ids, start_date, end_date):
        out = {}
        for sid in student_ids:
            rows: dict[str, int] = {}
            for (rec_sid, day), rec in self.records.items():
                if rec_sid == sid and start_date <= day <= end_date:
                    rows[rec.status.value] = rows.get(rec.status.value, 0) + 1
            out[sid] = StatusCounts.from_rows(rows.items())
        return out

    def statuses_on(self, student_ids, attendance_date):
        return {
            sid: self.records[(sid, attendance_date)].status
            for sid in student_ids
            if (sid, attendance_date) in self.records
        }


class InMemoryPromotions:
    """Single-writer promotion store; `race_once` simulates a concurrent creator."""

    def __init__(self, classes: InMemoryClasses, students: InMemoryStudents):
        self._classes = classes
        self._students = students
        self._lock = threading.Lock()
        self.race_once = 0
        self.calls = 0

    def promote(self, *, source, destination, student_ids) -> PromotionOutcome:
        with self._lock:
            self.calls += 1
            if self.race_once:
                self.race_once -= 1
                if not self._classes.with_key(destination):
                    self._classes.create(destination)
                raise ConcurrentUpdate("Concurrent update")

            for sid in student_ids:
                s = self._students.get_by_id(sid)
                if not s or s.class_id != source.class_id or source.school_id != destination.school_id:
                    raise UnauthorizedMembership("Some students do not belong to the selected class")

            existing = self._classes.with_key(destination)
            if existing:
                dest_id, created = existing.class_id, False
                for sid in student_ids:
                    s = self._students.rows[sid]
                    if self._students.roll_taken(s.roll_number, dest_id, destination.academic_year):
                        raise ConflictError(
                            f"Roll number already exists in class {destination.label} ({destination.academic_year})"
                        )
            else:
                dest_id, created = self._classes.create(destination), True

            for sid in student_ids:
                s = self._students.rows[sid]
                self._students.rows[sid] = replace(s, class_id=dest_id, academic_year=destination.academic_year)
            return PromotionOutcome(destination_class_id=dest_id, created_destination=created, moved=len(student_ids))


class InMemoryMessages:
    def __init__(self, classes: InMemoryClasses, students: InMemoryStudents, attendance: InMemoryAttendance):
        self._classes = classes
        self._students = students
        self._attendance = attendance
        self.schools = {SCHOOL_ID: "Green Valley School"}
        self.logs: list[dict] = []

    def school_name(self, school_id):
        return self.schools.get(school_id)

    def notice_targets(self, student_ids):
        out = []
        for s in (self._students.rows[i] for i in student_ids if i in self._students.rows):
            c = self._classes.get_by_id(s.class_id)
            out.append(NoticeTarget(s.student_id, s.name, s.parent_email, c.teacher_id, c.school_id))
        return out

    def absent_students(self, *, school_id, attendance_date, class_id=None, teacher_id=None):
        out = []
        for s in self._students.list_for_school(school_id):
            c = self._classes.get_by_id(s.class_id)
            if teacher_id is not None and c.teacher_id != teacher_id:
                continue
            if teacher_id is None and class_id is not None and c.class_id != class_id:
                continue
            rec = self._attendance.record_on(s.student_id, attendance_date)
            if not rec or rec.status != AttendanceStatus.ABSENT:
                continue
            sent = any(l["student_id"] == s.student_id and l["attendance_date"] == attendance_date for l in self.logs)
            out.append(
                AbsentStudent(s.student_id, s.name, s.roll_number, s.parent_email, None, c.standard, c.section, sent)
            )
        return out

    def log(self, **kwargs) -> int:
        self.logs.append(kwargs)
        return len(self.logs)

    def history(self, *, school_id, teacher_id=None, start_date=None, end_date=None, student_id=None, status=None, limit=100):
        from datetime import datetime

        out = []
        for i, l in enumerate(self.logs, start=1):
            s = self._students.get_by_id(l["student_id"])
            c = self._classes.get_by_id(s.class_id)
            if c.school_id != school_id:
                continue
            if teacher_id is not None and not (l["sent_by"] == teacher_id or c.teacher_id == teacher_id):
                continue
            if student_id is not None and l["student_id"] != student_id:
                continue
            if status is not None and l["status"] != status:
                continue
            out.append(
                MessageLogEntry(
                    message_id=i,
                    student_id=s.student_id,
                    student_name=s.name,
                    roll_number=s.roll_number,
                    standard=c.standard,
                    section=c.section,
                    recipient=l["recipient"],
                    subject=l["subject"],
                    status=l["status"],
                    attendance_date=l["attendance_date"],
                    sent_at=datetime(2024, 6, 20, 9, i),
                    error_message=l.get("error_message"),
                )
            )
        out.reverse()
        return out[:limit]


class RecordingSender:
    def __init__(self):
        self.sent: list[tuple] = []
        self.fail_for: set[int] = set()

    def send(self, student_id, recipient, absence_date, school_label, *, student_name=""):
        self.sent.append((student_id, recipient, absence_date, school_label))
        if student_id in self.fail_for:
            return SendResult(success=False, error="mailbox unavailable")
        return SendResult(success=True, message_id=f"<{student_id}@test>")


@dataclass
class World:
    clock: FixedClock
    classes: InMemoryClasses
    students: InMemoryStudents
    holidays: InMemoryHolidays
    attendance: InMemoryAttendance
    promotions: InMemoryPromotions
    messages: InMemoryMessages
    sender: RecordingSender
    container: object


@pytest.fixture
def world() -> World:
    clock = FixedClock(TODAY)
    classes = InMemoryClasses()
    students = InMemoryStudents(classes)
    holidays = InMemoryHolidays()
    attendance = InMemoryAttendance(students)
    promotions = InMemoryPromotions(classes, students)
    messages = InMemoryMessages(classes, students, attendance)
    sender = RecordingSender()
    container = build_services(
        classes=classes,
        students=students,
        holidays=holidays,
        attendance=attendance,
        promotions=promotions,
        messages=messages,
        sender=sender,
        clock=clock,
    )
    return World(clock, classes, students, holidays, attendance, promotions, messages, sender, container)


@pytest.fixture
def admin() -> RequestContext:
    return RequestContext(user_id=ADMIN_ID, role=Role.ADMIN, school_id=SCHOOL_ID)


@pytest.fixture
def teacher() -> RequestContext:
    return RequestContext(user_id=TEACHER_ID, role=Role.TEACHER, school_id=SCHOOL_ID)


@pytest.fixture
def class_10a(world) -> SchoolClass:
    return world.classes.add(10, "A", "2024-2025", teacher_id=TEACHER_ID)
