from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..courses.model import Course, Section


@dataclass(frozen=True)
class Event:
    """Domain entity: an event students check in to.

    `qr_code_data` is the payload currently accepted for QR check-in;
    `qr_code` is the rendered PNG as a data URL.
    """

    event_id: int
    name: str
    event_date: date
    event_time: time
    description: Optional[str] = None
    qr_code_data: Optional[str] = None
    qr_code: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CourseSectionRef:
    """A (course, section) pair an event is opened to."""

    course_id: int
    section_id: int


@dataclass(frozen=True)
class EventCourseSection:
    association_id: int
    event_id: int
    course_id: int
    section_id: int

    def matches(self, course_id: int, section_id: int) -> bool:
        return self.course_id == course_id and self.section_id == section_id


@dataclass(frozen=True)
class AssociationDetail:
    association: EventCourseSection
    course: Optional[Course] = None
    section: Optional[Section] = None


@dataclass(frozen=True)
class EventWithAssociations:
    event: Event
    associations: list[AssociationDetail] = field(default_factory=list)


@dataclass(frozen=True)
class StudentEventView:
    """An event visible to a student, with that student's own attendance (if any)."""

    event: Event
    associations: list[AssociationDetail]
    attendance: Optional[AttendanceRecord] = None


@dataclass(frozen=True)
class IssuedQr:
    payload: str
    image: str


@dataclass(frozen=True)
class QrPayload:
    event_id: int
    issued_at: int
