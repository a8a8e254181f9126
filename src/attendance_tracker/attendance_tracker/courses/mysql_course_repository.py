from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone
from .model import Course, Section, SectionWithCourse
from .repository import CourseRepository, SectionRepository

_COURSE_COLUMNS = {"name": "name", "description": "description"}
_SECTION_COLUMNS = {"course_id": "course_id", "name": "name"}


def _course_from_row(r: dict, prefix: str = "") -> Course:
    return Course(
        course_id=int(r[f"{prefix}course_id"]),
        name=r[f"{prefix}name"],
        description=r.get(f"{prefix}description"),
        created_at=r.get(f"{prefix}created_at"),
    )


def _section_from_row(r: dict) -> Section:
    return Section(
        section_id=int(r["section_id"]),
        course_id=int(r["course_id"]),
        name=r["name"],
        created_at=r.get("created_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT course_id, name, description, created_at FROM courses WHERE course_id=%s",
                (int(course_id),),
            )
            r = fetchone(cur)
            return _course_from_row(r) if r else None

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT course_id, name, description, created_at FROM courses ORDER BY name")
            return [_course_from_row(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM courses")
            return int(fetchone(cur)["n"])

    def create(self, *, name: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO courses(name, description) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def update(self, course_id: int, patch: dict) -> bool:
        set_clause, params = build_set_clause(patch, _COURSE_COLUMNS)
        if not set_clause:
            return self.get_by_id(course_id) is not None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE courses SET {set_clause} WHERE course_id=%s", (*params, int(course_id)))
            return cur.rowcount > 0

    def delete(self, course_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM courses WHERE course_id=%s", (int(course_id),))
            return cur.rowcount > 0


class MySQLSectionRepository(SectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    _JOIN_SQL = """
        SELECT s.section_id, s.course_id, s.name, s.created_at,
               c.course_id AS c_course_id, c.name AS c_name,
               c.description AS c_description, c.created_at AS c_created_at
        FROM sections s
        LEFT JOIN courses c ON c.course_id = s.course_id
    """

    @staticmethod
    def _joined(r: dict) -> SectionWithCourse:
        course = _course_from_row(r, prefix="c_") if r.get("c_course_id") is not None else None
        return SectionWithCourse(section=_section_from_row(r), course=course)

    def get_by_id(self, section_id: int) -> Optional[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT section_id, course_id, name, created_at FROM sections WHERE section_id=%s",
                (int(section_id),),
            )
            r = fetchone(cur)
            return _section_from_row(r) if r else None

    def get_with_course(self, section_id: int) -> Optional[SectionWithCourse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._JOIN_SQL + " WHERE s.section_id=%s", (int(section_id),))
            r = fetchone(cur)
            return self._joined(r) if r else None

    def list_with_course(self) -> Sequence[SectionWithCourse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._JOIN_SQL + " ORDER BY c.name, s.name")
            return [self._joined(r) for r in fetchall(cur)]

    def create(self, *, course_id: int, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO sections(course_id, name) VALUES(%s,%s)", (int(course_id), name))
            return int(cur.lastrowid)

    def update(self, section_id: int, patch: dict) -> bool:
        set_clause, params = build_set_clause(patch, _SECTION_COLUMNS)
        if not set_clause:
            return self.get_by_id(section_id) is not None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE sections SET {set_clause} WHERE section_id=%s", (*params, int(section_id)))
            return cur.rowcount > 0

    def delete(self, section_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sections WHERE section_id=%s", (int(section_id),))
            return cur.rowcount > 0
