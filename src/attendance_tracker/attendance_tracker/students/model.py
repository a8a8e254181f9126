from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..courses.model import Course, Section


@dataclass(frozen=True)
class Student:
    """Domain entity: a student pre-registered by an admin.

    `student_id` is the internal key; `student_number` is the human-assigned
    identifier printed on ID cards and used for self-registration.
    """

    student_id: int
    student_number: str
    name: str
    course_id: int
    section_id: int
    age: Optional[int] = None
    email: Optional[str] = None
    birthday: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentWithEnrollment:
    """Read-model: student joined with course and section."""

    student: Student
    course: Optional[Course]
    section: Optional[Section]


@dataclass(frozen=True)
class ImportSkip:
    row: int
    reason: str


@dataclass(frozen=True)
class ImportSummary:
    created: int = 0
    skipped: list[ImportSkip] = field(default_factory=list)


@dataclass(frozen=True)
class UploadedPicture:
    data: bytes
    mimetype: str
