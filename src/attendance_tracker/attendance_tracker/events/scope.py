from __future__ import annotations

from typing import Sequence

from ..attendance.repository import AttendanceRepository
from ..students.model import Student
from .model import EventWithAssociations, StudentEventView
from .repository import EventRepository


class EventScopeResolver:
    """Decide which events a student may see.

    An event is visible iff at least one of its associations names exactly the
    student's (course, section) pair. The event's active flag plays no part.
    """

    def __init__(self, events: EventRepository, attendance: AttendanceRepository):
        self._events = events
        self._attendance = attendance

    @staticmethod
    def is_visible(event: EventWithAssociations, student: Student) -> bool:
        return any(a.association.matches(student.course_id, student.section_id) for a in event.associations)

    def visible_events(self, student: Student) -> Sequence[EventWithAssociations]:
        return [e for e in self._events.list_with_associations() if self.is_visible(e, student)]

    def events_visible_to(self, student: Student) -> list[StudentEventView]:
        records = {r.event_id: r for r in self._attendance.list_for_student(student.student_id)}
        return [
            StudentEventView(
                event=e.event,
                associations=list(e.associations),
                attendance=records.get(e.event.event_id),
            )
            for e in self.visible_events(student)
        ]
