from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceWithEvent, AttendanceWithStudent


class AttendanceRepository(Protocol):
    def get_for_event_and_student(self, event_id: int, student_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_time_in(self, *, event_id: int, student_id: int, time_in: datetime) -> AttendanceRecord:
        """Insert the row for a first check-in.

        Raises DuplicateRecordError if a row for the pair already exists.
        """

        raise NotImplementedError

    def set_time_out(self, *, attendance_id: int, time_out: datetime) -> bool:
        """Set time_out only if it is still unset. Returns False when nothing changed."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student_with_event(self, student_id: int) -> Sequence[AttendanceWithEvent]:
        raise NotImplementedError

    def list_for_event_with_student(self, event_id: int) -> Sequence[AttendanceWithStudent]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
