from __future__ import annotations

from typing import Optional, Sequence

from ..courses.model import Course, Section
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone
from .model import Student, StudentWithEnrollment
from .repository import StudentRepository

_COLUMNS = {
    "student_number": "student_number",
    "name": "name",
    "course_id": "course_id",
    "section_id": "section_id",
    "age": "age",
    "email": "email",
    "birthday": "birthday",
    "profile_picture": "profile_picture",
}

_SELECT = """
    SELECT st.student_id, st.student_number, st.name, st.course_id, st.section_id,
           st.age, st.email, st.birthday, st.profile_picture, st.created_at
    FROM students st
"""

_SELECT_ENROLLMENT = """
    SELECT st.student_id, st.student_number, st.name, st.course_id, st.section_id,
           st.age, st.email, st.birthday, st.profile_picture, st.created_at,
           c.name AS course_name, c.description AS course_description,
           se.name AS section_name
    FROM students st
    LEFT JOIN courses c ON c.course_id = st.course_id
    LEFT JOIN sections se ON se.section_id = st.section_id
"""


def student_from_row(r: dict, prefix: str = "") -> Student:
    age = r.get(f"{prefix}age")
    return Student(
        student_id=int(r[f"{prefix}student_id"]),
        student_number=r[f"{prefix}student_number"],
        name=r[f"{prefix}name"],
        course_id=int(r[f"{prefix}course_id"]),
        section_id=int(r[f"{prefix}section_id"]),
        age=int(age) if age is not None else None,
        email=r.get(f"{prefix}email"),
        birthday=r.get(f"{prefix}birthday"),
        profile_picture=r.get(f"{prefix}profile_picture"),
        created_at=r.get(f"{prefix}created_at"),
    )


def enrollment_from_row(r: dict) -> StudentWithEnrollment:
    student = student_from_row(r)
    course = (
        Course(course_id=student.course_id, name=r["course_name"], description=r.get("course_description"))
        if r.get("course_name") is not None
        else None
    )
    section = (
        Section(section_id=student.section_id, course_id=student.course_id, name=r["section_name"])
        if r.get("section_name") is not None
        else None
    )
    return StudentWithEnrollment(student=student, course=course, section=section)


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE st.student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return student_from_row(r) if r else None

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE st.student_number=%s", (student_number,))
            r = fetchone(cur)
            return student_from_row(r) if r else None

    def get_enrollment(self, student_id: int) -> Optional[StudentWithEnrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ENROLLMENT + " WHERE st.student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return enrollment_from_row(r) if r else None

    def list_with_enrollment(self) -> Sequence[StudentWithEnrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ENROLLMENT + " ORDER BY st.student_number")
            return [enrollment_from_row(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students")
            return int(fetchone(cur)["n"])

    def count_enrolled(self, *, course_id: Optional[int] = None, section_id: Optional[int] = None) -> int:
        where, params = [], []
        if course_id is not None:
            where.append("course_id=%s")
            params.append(int(course_id))
        if section_id is not None:
            where.append("section_id=%s")
            params.append(int(section_id))
        sql = "SELECT COUNT(*) AS n FROM students"
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(fetchone(cur)["n"])

    def create(
        self,
        *,
        student_number: str,
        name: str,
        course_id: int,
        section_id: int,
        age: Optional[int] = None,
        email: Optional[str] = None,
        birthday: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(student_number, name, course_id, section_id, age, email, birthday)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (student_number, name, int(course_id), int(section_id), age, email, birthday),
            )
            return int(cur.lastrowid)

    def update(self, student_id: int, patch: dict) -> bool:
        set_clause, params = build_set_clause(patch, _COLUMNS)
        if not set_clause:
            return self.get_by_id(student_id) is not None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE students SET {set_clause} WHERE student_id=%s", (*params, int(student_id)))
            return cur.rowcount > 0

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
