from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import pandas as pd

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.exceptions import NotFoundError
from ..courses.repository import CourseRepository
from ..events.model import Event
from ..events.repository import EventRepository
from ..events.scope import EventScopeResolver
from ..students.model import Student
from ..students.repository import StudentRepository

_SHEET_COLUMNS = ["student_number", "name", "time_in", "time_out", "status"]


@dataclass(frozen=True)
class AdminStats:
    total_students: int
    active_events: int
    total_attendance: int
    total_courses: int


@dataclass(frozen=True)
class StudentStats:
    total_checkins: int
    this_month: int
    attendance_rate: int


@dataclass(frozen=True)
class EventSheet:
    event: Event
    rows: list[dict]


def _fmt(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


class ReportService:
    def __init__(
        self,
        *,
        students: StudentRepository,
        courses: CourseRepository,
        events: EventRepository,
        attendance: AttendanceRepository,
        scope: EventScopeResolver,
        clock: Callable[[], datetime] = now_local,
    ):
        self._students = students
        self._courses = courses
        self._events = events
        self._attendance = attendance
        self._scope = scope
        self._clock = clock

    def admin_stats(self) -> AdminStats:
        return AdminStats(
            total_students=self._students.count(),
            active_events=self._events.count_active(),
            total_attendance=self._attendance.count(),
            total_courses=self._courses.count(),
        )

    def student_stats(self, student: Student, *, now: Optional[datetime] = None) -> StudentStats:
        """Check-in counters plus the share of visible events the student attended.

        The rate is a whole percentage; 0 when no event is visible.
        """

        now = now or self._clock()
        records = self._attendance.list_for_student(student.student_id)
        this_month = sum(
            1 for r in records if r.time_in and r.time_in.year == now.year and r.time_in.month == now.month
        )

        visible = self._scope.events_visible_to(student)
        attended = sum(1 for v in visible if v.attendance is not None)
        rate = round(attended * 100 / len(visible)) if visible else 0

        return StudentStats(total_checkins=len(records), this_month=this_month, attendance_rate=rate)

    def event_sheet(self, event_id: int) -> EventSheet:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")

        rows = []
        for r in self._attendance.list_for_event_with_student(event.event_id):
            rows.append(
                {
                    "student_number": r.student.student_number if r.student else "",
                    "name": r.student.name if r.student else "Unknown",
                    "time_in": _fmt(r.record.time_in),
                    "time_out": _fmt(r.record.time_out),
                    "status": r.record.state.value,
                }
            )
        return EventSheet(event=event, rows=rows)

    def event_sheet_xlsx(self, event_id: int) -> bytes:
        sheet = self.event_sheet(event_id)
        df = pd.DataFrame(sheet.rows, columns=_SHEET_COLUMNS)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        return output.getvalue()
