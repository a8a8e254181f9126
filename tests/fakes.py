"""In-memory repositories for service and API tests."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from src.attendance_tracker.attendance_tracker.attendance.model import (
    AttendanceRecord,
    AttendanceWithEvent,
    AttendanceWithStudent,
)
from src.attendance_tracker.attendance_tracker.container import Container, assemble
from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import DuplicateRecordError
from src.attendance_tracker.attendance_tracker.courses.model import Course, Section, SectionWithCourse
from src.attendance_tracker.attendance_tracker.events.model import (
    AssociationDetail,
    CourseSectionRef,
    Event,
    EventCourseSection,
    EventWithAssociations,
    IssuedQr,
)
from src.attendance_tracker.attendance_tracker.settings.model import SystemSettings
from src.attendance_tracker.attendance_tracker.students.model import Student, StudentWithEnrollment
from src.attendance_tracker.attendance_tracker.users.model import User


class FakeCourses:
    def __init__(self):
        self.rows: dict[int, Course] = {}
        self._next_id = 1

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self.rows.get(int(course_id))

    def list_all(self) -> Sequence[Course]:
        return sorted(self.rows.values(), key=lambda c: c.name)

    def count(self) -> int:
        return len(self.rows)

    def create(self, *, name: str, description: Optional[str]) -> int:
        cid = self._next_id
        self._next_id += 1
        self.rows[cid] = Course(course_id=cid, name=name, description=description)
        return cid

    def update(self, course_id: int, patch: dict) -> bool:
        current = self.rows.get(int(course_id))
        if not current:
            return False
        self.rows[current.course_id] = replace(current, **patch)
        return True

    def delete(self, course_id: int) -> bool:
        return self.rows.pop(int(course_id), None) is not None


class FakeSections:
    def __init__(self, courses: FakeCourses):
        self._courses = courses
        self.rows: dict[int, Section] = {}
        self._next_id = 1

    def get_by_id(self, section_id: int) -> Optional[Section]:
        return self.rows.get(int(section_id))

    def get_with_course(self, section_id: int) -> Optional[SectionWithCourse]:
        s = self.rows.get(int(section_id))
        return SectionWithCourse(section=s, course=self._courses.get_by_id(s.course_id)) if s else None

    def list_with_course(self) -> Sequence[SectionWithCourse]:
        return [self.get_with_course(sid) for sid in sorted(self.rows)]

    def create(self, *, course_id: int, name: str) -> int:
        sid = self._next_id
        self._next_id += 1
        self.rows[sid] = Section(section_id=sid, course_id=course_id, name=name)
        return sid

    def update(self, section_id: int, patch: dict) -> bool:
        current = self.rows.get(int(section_id))
        if not current:
            return False
        self.rows[current.section_id] = replace(current, **patch)
        return True

    def delete(self, section_id: int) -> bool:
        return self.rows.pop(int(section_id), None) is not None


class FakeStudents:
    def __init__(self, courses: FakeCourses, sections: FakeSections):
        self._courses = courses
        self._sections = sections
        self.rows: dict[int, Student] = {}
        self._next_id = 1

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.rows.get(int(student_id))

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        return next((s for s in self.rows.values() if s.student_number == student_number), None)

    def get_enrollment(self, student_id: int) -> Optional[StudentWithEnrollment]:
        s = self.rows.get(int(student_id))
        if not s:
            return None
        return StudentWithEnrollment(
            student=s,
            course=self._courses.get_by_id(s.course_id),
            section=self._sections.get_by_id(s.section_id),
        )

    def list_with_enrollment(self) -> Sequence[StudentWithEnrollment]:
        return [self.get_enrollment(sid) for sid in sorted(self.rows)]

    def count(self) -> int:
        return len(self.rows)

    def count_enrolled(self, *, course_id=None, section_id=None) -> int:
        return sum(
            1
            for s in self.rows.values()
            if (course_id is None or s.course_id == course_id)
            and (section_id is None or s.section_id == section_id)
        )

    def create(self, *, student_number, name, course_id, section_id, age=None, email=None, birthday=None) -> int:
        if self.get_by_student_number(student_number):
            raise DuplicateRecordError("Duplicate entry for student_number")
        sid = self._next_id
        self._next_id += 1
        self.rows[sid] = Student(
            student_id=sid,
            student_number=student_number,
            name=name,
            course_id=course_id,
            section_id=section_id,
            age=age,
            email=email,
            birthday=birthday,
        )
        return sid

    def update(self, student_id: int, patch: dict) -> bool:
        current = self.rows.get(int(student_id))
        if not current:
            return False
        self.rows[current.student_id] = replace(current, **patch)
        return True

    def delete(self, student_id: int) -> bool:
        return self.rows.pop(int(student_id), None) is not None


class FakeUsers:
    def __init__(self):
        self.rows: dict[int, User] = {}
        self._next_id = 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.rows.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def create_user(self, *, email: str, password_hash: str, role: Role, student_number: Optional[str] = None) -> int:
        if self.get_by_email(email):
            raise DuplicateRecordError("Duplicate entry for email")
        uid = self._next_id
        self._next_id += 1
        self.rows[uid] = User(
            user_id=uid, email=email, password_hash=password_hash, role=role, student_number=student_number
        )
        return uid


class FakeEvents:
    def __init__(self, courses: FakeCourses, sections: FakeSections):
        self._courses = courses
        self._sections = sections
        self.rows: dict[int, Event] = {}
        self.associations: dict[int, list[EventCourseSection]] = {}
        self._next_id = 1
        self._next_assoc_id = 1

    def get_by_id(self, event_id: int) -> Optional[Event]:
        return self.rows.get(int(event_id))

    def list_associations(self, event_id: int) -> Sequence[AssociationDetail]:
        return [
            AssociationDetail(
                association=a,
                course=self._courses.get_by_id(a.course_id),
                section=self._sections.get_by_id(a.section_id),
            )
            for a in self.associations.get(int(event_id), [])
        ]

    def get_with_associations(self, event_id: int) -> Optional[EventWithAssociations]:
        event = self.rows.get(int(event_id))
        if not event:
            return None
        return EventWithAssociations(event=event, associations=list(self.list_associations(event.event_id)))

    def list_with_associations(self) -> Sequence[EventWithAssociations]:
        return [self.get_with_associations(eid) for eid in sorted(self.rows)]

    def count_active(self) -> int:
        return sum(1 for e in self.rows.values() if e.is_active)

    def _replace_associations(self, event_id: int, refs: Sequence[CourseSectionRef]) -> None:
        rows = []
        for ref in refs:
            rows.append(
                EventCourseSection(
                    association_id=self._next_assoc_id,
                    event_id=event_id,
                    course_id=ref.course_id,
                    section_id=ref.section_id,
                )
            )
            self._next_assoc_id += 1
        self.associations[event_id] = rows

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        event_date: date,
        event_time: time,
        is_active: bool,
        course_sections: Sequence[CourseSectionRef],
        issue_qr: Callable[[int], IssuedQr],
    ) -> int:
        eid = self._next_id
        self._next_id += 1
        qr = issue_qr(eid)
        self.rows[eid] = Event(
            event_id=eid,
            name=name,
            description=description,
            event_date=event_date,
            event_time=event_time,
            qr_code_data=qr.payload,
            qr_code=qr.image,
            is_active=is_active,
        )
        self._replace_associations(eid, course_sections)
        return eid

    def update(self, event_id: int, patch: dict, *, course_sections=None) -> bool:
        current = self.rows.get(int(event_id))
        if not current:
            return False
        self.rows[current.event_id] = replace(current, **patch)
        if course_sections is not None:
            self._replace_associations(current.event_id, course_sections)
        return True

    def set_qr(self, event_id: int, qr: IssuedQr) -> bool:
        return self.update(event_id, {"qr_code_data": qr.payload, "qr_code": qr.image})

    def delete(self, event_id: int) -> bool:
        self.associations.pop(int(event_id), None)
        return self.rows.pop(int(event_id), None) is not None

    def add(self, *, name: str = "Event", pairs: Sequence[tuple[int, int]] = (), is_active: bool = True) -> Event:
        """Test helper: insert an event with a fixed payload."""

        eid = self.create(
            name=name,
            description=None,
            event_date=date(2026, 3, 2),
            event_time=time(9, 0),
            is_active=is_active,
            course_sections=[CourseSectionRef(course_id=c, section_id=s) for c, s in pairs],
            issue_qr=lambda i: IssuedQr(payload=f'{{"eventId":{i},"timestamp":1}}', image="data:image/png;base64,"),
        )
        return self.rows[eid]


class FakeAttendance:
    """Attendance rows keyed by (event_id, student_id), enforcing the unique pair.

    When `read_barrier` is set, the first `parties` lookups wait for each other
    so concurrent callers all observe the same (absent) row.
    """

    def __init__(self, events: Optional[FakeEvents] = None, students: Optional[FakeStudents] = None):
        self._events = events
        self._students = students
        self.rows: dict[tuple[int, int], AttendanceRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.read_barrier: Optional[threading.Barrier] = None
        self._barrier_waits = 0

    def _maybe_wait(self) -> None:
        if self.read_barrier is None:
            return
        with self._lock:
            if self._barrier_waits >= self.read_barrier.parties:
                return
            self._barrier_waits += 1
        self.read_barrier.wait(timeout=5)

    def get_for_event_and_student(self, event_id: int, student_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            found = self.rows.get((int(event_id), int(student_id)))
        self._maybe_wait()
        return found

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return next((r for r in self.rows.values() if r.attendance_id == attendance_id), None)

    def create_time_in(self, *, event_id: int, student_id: int, time_in: datetime) -> AttendanceRecord:
        with self._lock:
            key = (int(event_id), int(student_id))
            if key in self.rows:
                raise DuplicateRecordError("Duplicate entry for (event_id, student_id)")
            rec = AttendanceRecord(
                attendance_id=self._next_id,
                event_id=key[0],
                student_id=key[1],
                time_in=time_in,
                created_at=time_in,
            )
            self._next_id += 1
            self.rows[key] = rec
            return rec

    def set_time_out(self, *, attendance_id: int, time_out: datetime) -> bool:
        with self._lock:
            for key, rec in self.rows.items():
                if rec.attendance_id == attendance_id:
                    if rec.time_out is not None:
                        return False
                    self.rows[key] = replace(rec, time_out=time_out)
                    return True
            return False

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        rows = [r for r in self.rows.values() if r.student_id == student_id]
        return sorted(rows, key=lambda r: r.created_at, reverse=True)

    def list_for_student_with_event(self, student_id: int) -> Sequence[AttendanceWithEvent]:
        return [
            AttendanceWithEvent(record=r, event=self._events.get_by_id(r.event_id) if self._events else None)
            for r in self.list_for_student(student_id)
        ]

    def list_for_event_with_student(self, event_id: int) -> Sequence[AttendanceWithStudent]:
        rows = sorted((r for r in self.rows.values() if r.event_id == event_id), key=lambda r: r.time_in)
        return [
            AttendanceWithStudent(record=r, student=self._students.get_by_id(r.student_id) if self._students else None)
            for r in rows
        ]

    def count(self) -> int:
        return len(self.rows)


class FakeSettings:
    def __init__(self):
        self.row: Optional[SystemSettings] = None
        self._next_id = 1
        self.creates = 0

    def get(self) -> Optional[SystemSettings]:
        return self.row

    def create(self, *, system_name: str, qr_code_enabled: bool) -> int:
        if self.row is not None:
            raise DuplicateRecordError("Duplicate entry for singleton_key")
        self.creates += 1
        self.row = SystemSettings(
            settings_id=self._next_id, system_name=system_name, qr_code_enabled=qr_code_enabled
        )
        self._next_id += 1
        return self.row.settings_id

    def update(self, settings_id: int, patch: dict) -> bool:
        if self.row is None or self.row.settings_id != settings_id:
            return False
        self.row = replace(self.row, **patch)
        return True


def build_fake_container(*, secret_key: str = "test-secret", reject_inactive: bool = False) -> Container:
    courses = FakeCourses()
    sections = FakeSections(courses)
    students = FakeStudents(courses, sections)
    events = FakeEvents(courses, sections)
    return assemble(
        users_repo=FakeUsers(),
        students_repo=students,
        courses_repo=courses,
        sections_repo=sections,
        events_repo=events,
        attendance_repo=FakeAttendance(events, students),
        settings_repo=FakeSettings(),
        secret_key=secret_key,
        reject_inactive=reject_inactive,
    )


def seed_enrollment(container: Container) -> dict:
    """Computer Science with sections A and B, plus one student in each."""

    cs = container.courses_repo.create(name="Computer Science", description=None)
    sec_a = container.sections_repo.create(course_id=cs, name="Section A")
    sec_b = container.sections_repo.create(course_id=cs, name="Section B")
    s1 = container.students_repo.create(student_number="S1", name="Ana", course_id=cs, section_id=sec_a)
    s2 = container.students_repo.create(student_number="S2", name="Ben", course_id=cs, section_id=sec_b)
    return {"course": cs, "section_a": sec_a, "section_b": sec_b, "s1": s1, "s2": s2}
