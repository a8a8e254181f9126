from __future__ import annotations

import logging
from datetime import datetime
from typing import IO, Callable, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import CheckInType, Role
from ..core.exceptions import (
    AlreadyCompleteError,
    AuthorizationError,
    DuplicateRecordError,
    NotFoundError,
    ValidationError,
)
from ..events.model import Event
from ..events.qr import QrCodeService
from ..events.repository import EventRepository
from ..settings.service import SettingsService
from ..students.repository import StudentRepository
from ..users.model import AuthenticatedPrincipal
from .model import AttendanceRecord, AttendanceWithEvent, AttendanceWithStudent, CheckInResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance ledger: one row per (event, student), ABSENT -> IN -> OUT.

    The first check-in records time_in, the second records time_out, any later
    attempt fails with AlreadyCompleteError. A completed row is never reopened.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        events: EventRepository,
        settings: SettingsService,
        qr: QrCodeService,
        *,
        reject_inactive: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._events = events
        self._settings = settings
        self._qr = qr
        self._reject_inactive = bool(reject_inactive)
        self._clock = clock

    # ----- state machine -----

    def check_in(self, event_id: int, student_id: int, *, now: datetime | None = None) -> CheckInResult:
        now = now or self._clock()

        existing = self._attendance.get_for_event_and_student(event_id, student_id)
        if existing is None:
            try:
                record = self._attendance.create_time_in(event_id=event_id, student_id=student_id, time_in=now)
                logger.info("Student %s checked in to event %s", student_id, event_id)
                return CheckInResult(type=CheckInType.IN, record=record)
            except DuplicateRecordError:
                # A concurrent first check-in won the insert; treat this call as the next step.
                existing = self._attendance.get_for_event_and_student(event_id, student_id)
                if existing is None:
                    raise

        return self._check_out(existing, now)

    def _check_out(self, record: AttendanceRecord, now: datetime) -> CheckInResult:
        if record.time_out is not None:
            raise AlreadyCompleteError()

        if not self._attendance.set_time_out(attendance_id=record.attendance_id, time_out=now):
            raise AlreadyCompleteError()

        updated = self._attendance.get_by_id(record.attendance_id)
        logger.info("Student %s checked out of event %s", record.student_id, record.event_id)
        return CheckInResult(type=CheckInType.OUT, record=updated)

    # ----- identification paths -----

    def _require_event(self, event_id: int) -> Event:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        if self._reject_inactive and not event.is_active:
            raise ValidationError("Event is not active", field="event_id")
        return event

    def check_in_by_qr(self, principal: AuthenticatedPrincipal, qr_code_data: str) -> CheckInResult:
        """Student scans the event's QR code; identity comes from the principal only."""

        if principal.role != Role.STUDENT:
            raise AuthorizationError("Student access required")

        raw = require_non_empty(qr_code_data, "qr_code_data")
        if not self._settings.qr_code_enabled():
            raise ValidationError("QR code check-in is disabled", field="qr_code_data")

        payload = self._qr.decode_payload(raw)
        event = self._require_event(payload.event_id)
        if event.qr_code_data != raw:
            raise ValidationError("QR code is no longer valid for this event", field="qr_code_data")

        student = self._students.get_by_student_number(principal.student_number or "")
        if not student:
            raise NotFoundError("Student not found")

        return self.check_in(event.event_id, student.student_id)

    def check_in_by_qr_image(self, principal: AuthenticatedPrincipal, stream: IO[bytes]) -> CheckInResult:
        if principal.role != Role.STUDENT:
            raise AuthorizationError("Student access required")
        return self.check_in_by_qr(principal, self._qr.read_image(stream))

    def check_in_manual(self, student_number: str, event_id) -> CheckInResult:
        """Admin enters a student number by hand."""

        number = require_non_empty(student_number, "student_number")
        event = self._require_event(require_positive_int(event_id, "event_id"))

        student = self._students.get_by_student_number(number)
        if not student:
            raise NotFoundError("Student not found")

        return self.check_in(event.event_id, student.student_id)

    # ----- reads -----

    def history_for_student(self, student_id: int) -> Sequence[AttendanceWithEvent]:
        """Newest first."""

        return self._attendance.list_for_student_with_event(int(student_id))

    def event_attendance(self, event_id: int) -> Sequence[AttendanceWithStudent]:
        if not self._events.get_by_id(int(event_id)):
            raise NotFoundError("Event not found")
        return self._attendance.list_for_event_with_student(int(event_id))
