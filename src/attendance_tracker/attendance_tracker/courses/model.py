from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Course:
    course_id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Section:
    section_id: int
    course_id: int
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SectionWithCourse:
    """Read-model: section joined with its course (course may be missing if deleted)."""

    section: Section
    course: Optional[Course]
