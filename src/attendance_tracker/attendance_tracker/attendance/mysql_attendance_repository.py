from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..events.mysql_event_repository import event_from_row
from ..students.mysql_student_repository import student_from_row
from .model import AttendanceRecord, AttendanceWithEvent, AttendanceWithStudent
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.event_id, a.student_id, a.time_in, a.time_out, a.created_at
    FROM attendance a
"""


def _record_from_row(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        event_id=int(r["event_id"]),
        student_id=int(r["student_id"]),
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_event_and_student(self, event_id: int, student_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.event_id=%s AND a.student_id=%s", (int(event_id), int(student_id)))
            r = fetchone(cur)
            return _record_from_row(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _record_from_row(r) if r else None

    def create_time_in(self, *, event_id: int, student_id: int, time_in: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(event_id, student_id, time_in, time_out)
                VALUES(%s,%s,%s,NULL)
                """,
                (int(event_id), int(student_id), time_in),
            )
            attendance_id = int(cur.lastrowid)
            cur.execute(_SELECT + " WHERE a.attendance_id=%s", (attendance_id,))
            return _record_from_row(fetchone(cur))

    def set_time_out(self, *, attendance_id: int, time_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET time_out=%s
                WHERE attendance_id=%s AND time_out IS NULL
                """,
                (time_out, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.student_id=%s ORDER BY a.created_at DESC", (int(student_id),))
            return [_record_from_row(r) for r in fetchall(cur)]

    def list_for_student_with_event(self, student_id: int) -> Sequence[AttendanceWithEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.attendance_id, a.event_id, a.student_id, a.time_in, a.time_out, a.created_at,
                       e.event_id AS e_event_id, e.name AS e_name, e.description AS e_description,
                       e.event_date AS e_event_date, e.event_time AS e_event_time,
                       e.is_active AS e_is_active, e.created_at AS e_created_at
                FROM attendance a
                LEFT JOIN events e ON e.event_id = a.event_id
                WHERE a.student_id=%s
                ORDER BY a.created_at DESC, a.attendance_id DESC
                """,
                (int(student_id),),
            )
            out: list[AttendanceWithEvent] = []
            for r in fetchall(cur):
                event = event_from_row(r, prefix="e_") if r.get("e_event_id") is not None else None
                out.append(AttendanceWithEvent(record=_record_from_row(r), event=event))
            return out

    def list_for_event_with_student(self, event_id: int) -> Sequence[AttendanceWithStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.attendance_id, a.event_id, a.student_id, a.time_in, a.time_out, a.created_at,
                       st.student_id AS st_student_id, st.student_number AS st_student_number,
                       st.name AS st_name, st.course_id AS st_course_id, st.section_id AS st_section_id,
                       st.age AS st_age, st.email AS st_email, st.birthday AS st_birthday,
                       st.created_at AS st_created_at
                FROM attendance a
                LEFT JOIN students st ON st.student_id = a.student_id
                WHERE a.event_id=%s
                ORDER BY a.time_in ASC
                """,
                (int(event_id),),
            )
            out: list[AttendanceWithStudent] = []
            for r in fetchall(cur):
                student = student_from_row(r, prefix="st_") if r.get("st_student_id") is not None else None
                out.append(AttendanceWithStudent(record=_record_from_row(r), student=student))
            return out

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance")
            return int(fetchone(cur)["n"])
