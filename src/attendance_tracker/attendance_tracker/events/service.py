from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, parse_bool, require_non_empty, require_positive_int
from ..core.exceptions import NotFoundError, ValidationError
from ..courses.repository import CourseRepository, SectionRepository
from .model import CourseSectionRef, EventWithAssociations
from .qr import QrCodeService
from .repository import EventRepository

logger = logging.getLogger(__name__)


def _parse_event_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(require_non_empty(value, "event_date"))
    except ValueError:
        raise ValidationError("event_date must be YYYY-MM-DD", field="event_date")


def _parse_event_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    raw = require_non_empty(value, "event_time")
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise ValidationError("event_time must be HH:MM", field="event_time")


class EventService:
    """Use case: manage events, their QR codes and their course/section associations (admin)."""

    def __init__(
        self,
        events: EventRepository,
        courses: CourseRepository,
        sections: SectionRepository,
        qr: QrCodeService,
    ):
        self._events = events
        self._courses = courses
        self._sections = sections
        self._qr = qr

    def list_events(self) -> Sequence[EventWithAssociations]:
        return self._events.list_with_associations()

    def get_event(self, event_id: int) -> EventWithAssociations:
        found = self._events.get_with_associations(int(event_id))
        if not found:
            raise NotFoundError("Event not found")
        return found

    def _parse_course_sections(self, raw: Any) -> list[CourseSectionRef]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ValidationError("course_sections must be a list", field="course_sections")

        refs: list[CourseSectionRef] = []
        for item in raw:
            if not isinstance(item, dict):
                raise ValidationError("course_sections items must be objects", field="course_sections")
            course_id = require_positive_int(item.get("course_id"), "course_id")
            section_id = require_positive_int(item.get("section_id"), "section_id")

            if not self._courses.get_by_id(course_id):
                raise ValidationError(f"Course {course_id} does not exist", field="course_sections")
            section = self._sections.get_by_id(section_id)
            if not section or section.course_id != course_id:
                raise ValidationError(
                    f"Section {section_id} does not belong to course {course_id}",
                    field="course_sections",
                )

            ref = CourseSectionRef(course_id=course_id, section_id=section_id)
            if ref not in refs:
                refs.append(ref)
        return refs

    def create_event(self, data: dict) -> EventWithAssociations:
        name = require_non_empty(data.get("name"), "name")
        event_date = _parse_event_date(data.get("event_date"))
        event_time = _parse_event_time(data.get("event_time"))
        is_active = parse_bool(data["is_active"], "is_active") if "is_active" in data else True
        course_sections = self._parse_course_sections(data.get("course_sections"))

        event_id = self._events.create(
            name=name,
            description=optional_text(data.get("description")),
            event_date=event_date,
            event_time=event_time,
            is_active=is_active,
            course_sections=course_sections,
            issue_qr=self._qr.issue,
        )
        logger.info("Created event %s (%s) open to %s course/section pair(s)", event_id, name, len(course_sections))
        return self.get_event(event_id)

    def update_event(self, event_id: int, data: dict) -> EventWithAssociations:
        patch: dict[str, Any] = {}
        if "name" in data:
            patch["name"] = require_non_empty(data.get("name"), "name")
        if "description" in data:
            patch["description"] = optional_text(data.get("description"))
        if "event_date" in data:
            patch["event_date"] = _parse_event_date(data.get("event_date"))
        if "event_time" in data:
            patch["event_time"] = _parse_event_time(data.get("event_time"))
        if "is_active" in data:
            patch["is_active"] = parse_bool(data.get("is_active"), "is_active")

        course_sections: Optional[list[CourseSectionRef]] = None
        if "course_sections" in data:
            course_sections = self._parse_course_sections(data.get("course_sections"))

        if not self._events.update(int(event_id), patch, course_sections=course_sections):
            raise NotFoundError("Event not found")
        return self.get_event(event_id)

    def delete_event(self, event_id: int) -> None:
        if not self._events.delete(int(event_id)):
            raise NotFoundError("Event not found")
        logger.info("Deleted event %s", event_id)

    def regenerate_qr(self, event_id: int, *, now: Optional[datetime] = None) -> EventWithAssociations:
        """Issue a fresh payload. Older payloads stop working for new check-ins;
        attendance already recorded is untouched."""

        qr = self._qr.issue(int(event_id), now=now)
        if not self._events.set_qr(int(event_id), qr):
            raise NotFoundError("Event not found")
        logger.info("Regenerated QR code for event %s", event_id)
        return self.get_event(event_id)

    def qr_png(self, event_id: int) -> bytes:
        event = self.get_event(event_id).event
        if not event.qr_code_data:
            raise NotFoundError("Event has no QR code")
        return self._qr.render_png(event.qr_code_data)
