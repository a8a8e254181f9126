from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course, Section, SectionWithCourse


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, course_id: int, patch: dict) -> bool:
        """Apply a partial update (keys: name, description)."""

        raise NotImplementedError

    def delete(self, course_id: int) -> bool:
        raise NotImplementedError


class SectionRepository(Protocol):
    def get_by_id(self, section_id: int) -> Optional[Section]:
        raise NotImplementedError

    def get_with_course(self, section_id: int) -> Optional[SectionWithCourse]:
        raise NotImplementedError

    def list_with_course(self) -> Sequence[SectionWithCourse]:
        raise NotImplementedError

    def create(self, *, course_id: int, name: str) -> int:
        raise NotImplementedError

    def update(self, section_id: int, patch: dict) -> bool:
        """Apply a partial update (keys: course_id, name)."""

        raise NotImplementedError

    def delete(self, section_id: int) -> bool:
        raise NotImplementedError
