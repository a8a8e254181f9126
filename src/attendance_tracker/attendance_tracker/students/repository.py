from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, StudentWithEnrollment


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        raise NotImplementedError

    def get_enrollment(self, student_id: int) -> Optional[StudentWithEnrollment]:
        raise NotImplementedError

    def list_with_enrollment(self) -> Sequence[StudentWithEnrollment]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def count_enrolled(self, *, course_id: Optional[int] = None, section_id: Optional[int] = None) -> int:
        """Students in the given course and/or section."""

        raise NotImplementedError

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
        """Insert a student. Raises DuplicateRecordError when the number is taken."""

        raise NotImplementedError

    def update(self, student_id: int, patch: dict) -> bool:
        """Partial update. Keys: student_number, name, course_id, section_id,
        age, email, birthday, profile_picture."""

        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError
