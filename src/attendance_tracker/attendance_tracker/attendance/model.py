from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..core.enums import AttendanceState, CheckInType

if TYPE_CHECKING:
    from ..events.model import Event
    from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance at one event.

    At most one row exists per (event_id, student_id). It is created on the first
    check-in and only ever gains a time_out afterwards.
    """

    attendance_id: int
    event_id: int
    student_id: int
    time_in: Optional[datetime]
    time_out: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def state(self) -> AttendanceState:
        if self.time_out is not None:
            return AttendanceState.PRESENT_OUT
        if self.time_in is not None:
            return AttendanceState.PRESENT_IN
        return AttendanceState.ABSENT


@dataclass(frozen=True)
class CheckInResult:
    type: CheckInType
    record: AttendanceRecord


@dataclass(frozen=True)
class AttendanceWithEvent:
    """Read-model: a student's attendance row joined with its event."""

    record: AttendanceRecord
    event: Optional["Event"]


@dataclass(frozen=True)
class AttendanceWithStudent:
    """Read-model: an event's attendance row joined with the student."""

    record: AttendanceRecord
    student: Optional["Student"]
