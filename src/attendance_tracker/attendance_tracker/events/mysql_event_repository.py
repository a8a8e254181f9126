from __future__ import annotations

from datetime import date, time
from typing import Callable, Optional, Sequence

from ..courses.model import Course, Section
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import (
    AssociationDetail,
    CourseSectionRef,
    Event,
    EventCourseSection,
    EventWithAssociations,
    IssuedQr,
)
from .repository import EventRepository

_COLUMNS = {
    "name": "name",
    "description": "description",
    "event_date": "event_date",
    "event_time": "event_time",
    "is_active": "is_active",
}

_SELECT = """
    SELECT e.event_id, e.name, e.description, e.event_date, e.event_time,
           e.qr_code_data, e.qr_code, e.is_active, e.created_at
    FROM events e
"""

_SELECT_ASSOCIATIONS = """
    SELECT ecs.association_id, ecs.event_id, ecs.course_id, ecs.section_id,
           c.name AS course_name, c.description AS course_description,
           s.name AS section_name
    FROM event_course_sections ecs
    LEFT JOIN courses c ON c.course_id = ecs.course_id
    LEFT JOIN sections s ON s.section_id = ecs.section_id
"""


def event_from_row(r: dict, prefix: str = "") -> Event:
    return Event(
        event_id=int(r[f"{prefix}event_id"]),
        name=r[f"{prefix}name"],
        description=r.get(f"{prefix}description"),
        event_date=r[f"{prefix}event_date"],
        event_time=normalize_mysql_time(r[f"{prefix}event_time"]),
        qr_code_data=r.get(f"{prefix}qr_code_data"),
        qr_code=r.get(f"{prefix}qr_code"),
        is_active=bool(r.get(f"{prefix}is_active", True)),
        created_at=r.get(f"{prefix}created_at"),
    )


def _association_from_row(r: dict) -> AssociationDetail:
    assoc = EventCourseSection(
        association_id=int(r["association_id"]),
        event_id=int(r["event_id"]),
        course_id=int(r["course_id"]),
        section_id=int(r["section_id"]),
    )
    course = (
        Course(course_id=assoc.course_id, name=r["course_name"], description=r.get("course_description"))
        if r.get("course_name") is not None
        else None
    )
    section = (
        Section(section_id=assoc.section_id, course_id=assoc.course_id, name=r["section_name"])
        if r.get("section_name") is not None
        else None
    )
    return AssociationDetail(association=assoc, course=course, section=section)


def _insert_associations(cur, event_id: int, course_sections: Sequence[CourseSectionRef]) -> None:
    for cs in course_sections:
        cur.execute(
            "INSERT INTO event_course_sections(event_id, course_id, section_id) VALUES(%s,%s,%s)",
            (int(event_id), int(cs.course_id), int(cs.section_id)),
        )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return event_from_row(r) if r else None

    def get_with_associations(self, event_id: int) -> Optional[EventWithAssociations]:
        event = self.get_by_id(event_id)
        if not event:
            return None
        return EventWithAssociations(event=event, associations=list(self.list_associations(event.event_id)))

    def list_with_associations(self) -> Sequence[EventWithAssociations]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY e.event_date DESC, e.event_time DESC")
            events = [event_from_row(r) for r in fetchall(cur)]

            cur.execute(_SELECT_ASSOCIATIONS + " ORDER BY ecs.association_id")
            by_event: dict[int, list[AssociationDetail]] = {}
            for r in fetchall(cur):
                detail = _association_from_row(r)
                by_event.setdefault(detail.association.event_id, []).append(detail)

        return [EventWithAssociations(event=e, associations=by_event.get(e.event_id, [])) for e in events]

    def list_associations(self, event_id: int) -> Sequence[AssociationDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_ASSOCIATIONS + " WHERE ecs.event_id=%s ORDER BY ecs.association_id",
                (int(event_id),),
            )
            return [_association_from_row(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM events WHERE is_active=1")
            return int(fetchone(cur)["n"])

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(name, description, event_date, event_time, is_active)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, description, event_date, event_time, int(bool(is_active))),
            )
            event_id = int(cur.lastrowid)

            qr = issue_qr(event_id)
            cur.execute(
                "UPDATE events SET qr_code_data=%s, qr_code=%s WHERE event_id=%s",
                (qr.payload, qr.image, event_id),
            )
            _insert_associations(cur, event_id, course_sections)
            return event_id

    def update(
        self,
        event_id: int,
        patch: dict,
        *,
        course_sections: Optional[Sequence[CourseSectionRef]] = None,
    ) -> bool:
        values = dict(patch)
        if "is_active" in values:
            values["is_active"] = int(bool(values["is_active"]))
        set_clause, params = build_set_clause(values, _COLUMNS)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT event_id FROM events WHERE event_id=%s FOR UPDATE", (int(event_id),))
            if not fetchone(cur):
                return False

            if set_clause:
                cur.execute(f"UPDATE events SET {set_clause} WHERE event_id=%s", (*params, int(event_id)))

            if course_sections is not None:
                cur.execute("DELETE FROM event_course_sections WHERE event_id=%s", (int(event_id),))
                _insert_associations(cur, int(event_id), course_sections)
            return True

    def set_qr(self, event_id: int, qr: IssuedQr) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET qr_code_data=%s, qr_code=%s WHERE event_id=%s",
                (qr.payload, qr.image, int(event_id)),
            )
            return cur.rowcount > 0

    def delete(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM event_course_sections WHERE event_id=%s", (int(event_id),))
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0
