from __future__ import annotations

from typing import Any, Optional

from ..attendance.model import AttendanceRecord, AttendanceWithEvent, AttendanceWithStudent, CheckInResult
from ..courses.model import Course, Section, SectionWithCourse
from ..events.model import AssociationDetail, Event, EventWithAssociations, StudentEventView
from ..settings.model import SystemSettings
from ..students.model import ImportSummary, Student, StudentWithEnrollment
from ..users.model import AuthenticatedPrincipal, User
from .datetime_utils import iso_or_none


def _time_str(value) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def course_json(c: Optional[Course]) -> Optional[dict]:
    if c is None:
        return None
    return {
        "course_id": c.course_id,
        "name": c.name,
        "description": c.description,
        "created_at": iso_or_none(c.created_at),
    }


def section_json(s: Optional[Section]) -> Optional[dict]:
    if s is None:
        return None
    return {"section_id": s.section_id, "course_id": s.course_id, "name": s.name, "created_at": iso_or_none(s.created_at)}


def section_with_course_json(s: SectionWithCourse) -> dict:
    out = section_json(s.section)
    out["course"] = course_json(s.course)
    return out


def student_json(s: Student) -> dict:
    return {
        "student_id": s.student_id,
        "student_number": s.student_number,
        "name": s.name,
        "course_id": s.course_id,
        "section_id": s.section_id,
        "age": s.age,
        "email": s.email,
        "birthday": s.birthday,
        "profile_picture": s.profile_picture,
        "created_at": iso_or_none(s.created_at),
    }


def enrollment_json(e: StudentWithEnrollment) -> dict:
    out = student_json(e.student)
    out["course"] = course_json(e.course)
    out["section"] = section_json(e.section)
    return out


def import_summary_json(summary: ImportSummary) -> dict:
    return {
        "created": summary.created,
        "skipped": [{"row": s.row, "reason": s.reason} for s in summary.skipped],
    }


def user_json(u: User | AuthenticatedPrincipal) -> dict:
    # password_hash never leaves the service
    return {"user_id": u.user_id, "email": u.email, "role": u.role.value, "student_number": u.student_number}


def event_json(e: Event, *, include_qr: bool = True) -> dict:
    out: dict[str, Any] = {
        "event_id": e.event_id,
        "name": e.name,
        "description": e.description,
        "event_date": e.event_date.isoformat(),
        "event_time": _time_str(e.event_time),
        "is_active": e.is_active,
        "created_at": iso_or_none(e.created_at),
    }
    if include_qr:
        out["qr_code_data"] = e.qr_code_data
        out["qr_code"] = e.qr_code
    return out


def association_json(a: AssociationDetail) -> dict:
    return {
        "association_id": a.association.association_id,
        "course_id": a.association.course_id,
        "section_id": a.association.section_id,
        "course_name": a.course.name if a.course else None,
        "section_name": a.section.name if a.section else None,
    }


def event_with_associations_json(e: EventWithAssociations) -> dict:
    out = event_json(e.event)
    out["course_sections"] = [association_json(a) for a in e.associations]
    return out


def attendance_json(r: Optional[AttendanceRecord]) -> Optional[dict]:
    if r is None:
        return None
    return {
        "attendance_id": r.attendance_id,
        "event_id": r.event_id,
        "student_id": r.student_id,
        "time_in": iso_or_none(r.time_in),
        "time_out": iso_or_none(r.time_out),
        "state": r.state.value,
        "created_at": iso_or_none(r.created_at),
    }


def student_event_json(v: StudentEventView) -> dict:
    # Students never see the raw payload; they scan it.
    out = event_json(v.event, include_qr=False)
    out["course_sections"] = [association_json(a) for a in v.associations]
    out["attendance"] = attendance_json(v.attendance)
    return out


def attendance_with_event_json(a: AttendanceWithEvent) -> dict:
    out = attendance_json(a.record)
    out["event"] = event_json(a.event, include_qr=False) if a.event else None
    return out


def attendance_with_student_json(a: AttendanceWithStudent) -> dict:
    out = attendance_json(a.record)
    out["student"] = (
        {"student_id": a.student.student_id, "student_number": a.student.student_number, "name": a.student.name}
        if a.student
        else None
    )
    return out


def check_in_json(result: CheckInResult) -> dict:
    return {"type": result.type.value, "attendance": attendance_json(result.record)}


def settings_json(s: SystemSettings) -> dict:
    return {
        "settings_id": s.settings_id,
        "system_name": s.system_name,
        "qr_code_enabled": s.qr_code_enabled,
        "updated_at": iso_or_none(s.updated_at),
    }
