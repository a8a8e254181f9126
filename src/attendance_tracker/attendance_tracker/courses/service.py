from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty, require_positive_int
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import Course, SectionWithCourse
from .repository import CourseRepository, SectionRepository

logger = logging.getLogger(__name__)


class CourseService:
    """Use case: manage the course/section catalogue (admin)."""

    def __init__(self, courses: CourseRepository, sections: SectionRepository, students: StudentRepository):
        self._courses = courses
        self._sections = sections
        self._students = students

    # ----- courses -----

    def list_courses(self) -> Sequence[Course]:
        return self._courses.list_all()

    def get_course(self, course_id: int) -> Course:
        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError("Course not found")
        return course

    def create_course(self, *, name: str, description: Optional[str] = None) -> Course:
        name = require_non_empty(name, "name")
        course_id = self._courses.create(name=name, description=optional_text(description))
        logger.info("Created course %s (%s)", course_id, name)
        return self.get_course(course_id)

    def update_course(self, course_id: int, data: dict) -> Course:
        patch: dict = {}
        if "name" in data:
            patch["name"] = require_non_empty(data.get("name"), "name")
        if "description" in data:
            patch["description"] = optional_text(data.get("description"))

        if not self._courses.update(int(course_id), patch):
            raise NotFoundError("Course not found")
        return self.get_course(course_id)

    def delete_course(self, course_id: int) -> None:
        if self._students.count_enrolled(course_id=int(course_id)):
            raise ConflictError("Course has enrolled students")
        if not self._courses.delete(int(course_id)):
            raise NotFoundError("Course not found")
        logger.info("Deleted course %s", course_id)

    # ----- sections -----

    def list_sections(self) -> Sequence[SectionWithCourse]:
        return self._sections.list_with_course()

    def get_section(self, section_id: int) -> SectionWithCourse:
        joined = self._sections.get_with_course(int(section_id))
        if not joined:
            raise NotFoundError("Section not found")
        return joined

    def create_section(self, *, course_id, name: str) -> SectionWithCourse:
        course_id = require_positive_int(course_id, "course_id")
        name = require_non_empty(name, "name")
        if not self._courses.get_by_id(course_id):
            raise ValidationError("Course does not exist", field="course_id")

        section_id = self._sections.create(course_id=course_id, name=name)
        logger.info("Created section %s (%s) in course %s", section_id, name, course_id)
        return self.get_section(section_id)

    def update_section(self, section_id: int, data: dict) -> SectionWithCourse:
        patch: dict = {}
        if "course_id" in data:
            course_id = require_positive_int(data.get("course_id"), "course_id")
            if not self._courses.get_by_id(course_id):
                raise ValidationError("Course does not exist", field="course_id")
            patch["course_id"] = course_id
        if "name" in data:
            patch["name"] = require_non_empty(data.get("name"), "name")

        if not self._sections.update(int(section_id), patch):
            raise NotFoundError("Section not found")
        return self.get_section(section_id)

    def delete_section(self, section_id: int) -> None:
        if self._students.count_enrolled(section_id=int(section_id)):
            raise ConflictError("Section has enrolled students")
        if not self._sections.delete(int(section_id)):
            raise NotFoundError("Section not found")
        logger.info("Deleted section %s", section_id)
