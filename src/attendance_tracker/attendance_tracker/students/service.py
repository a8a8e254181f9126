from __future__ import annotations

import io
import logging
from typing import IO, Any, Iterable, Optional, Sequence

import pandas as pd

from ..common.validators import (
    optional_text,
    require_digits,
    require_email,
    require_non_empty,
    require_positive_int,
)
from ..core.exceptions import DuplicateRecordError, ConflictError, NotFoundError, ValidationError
from ..courses.repository import CourseRepository, SectionRepository
from . import pictures
from .model import ImportSkip, ImportSummary, StudentWithEnrollment, UploadedPicture
from .repository import StudentRepository

logger = logging.getLogger(__name__)

# Spreadsheet headers accepted on import, mapped to our field names.
_IMPORT_ALIASES = {
    "student_number": "student_number",
    "studentid": "student_number",
    "student_id": "student_number",
    "name": "name",
    "course_id": "course_id",
    "courseid": "course_id",
    "section_id": "section_id",
    "sectionid": "section_id",
    "age": "age",
    "email": "email",
    "birthday": "birthday",
}

_REQUIRED_IMPORT_FIELDS = ("student_number", "name", "course_id", "section_id")


class StudentService:
    """Use case: manage the student roster (admin) and student self-service profile."""

    def __init__(self, students: StudentRepository, courses: CourseRepository, sections: SectionRepository):
        self._students = students
        self._courses = courses
        self._sections = sections

    def list_students(self) -> Sequence[StudentWithEnrollment]:
        return self._students.list_with_enrollment()

    def get_student(self, student_id: int) -> StudentWithEnrollment:
        joined = self._students.get_enrollment(int(student_id))
        if not joined:
            raise NotFoundError("Student not found")
        return joined

    def find_by_number(self, student_number: str) -> Optional[StudentWithEnrollment]:
        student = self._students.get_by_student_number((student_number or "").strip())
        if not student:
            return None
        return self._students.get_enrollment(student.student_id)

    def _check_enrollment(self, course_id: int, section_id: int) -> None:
        if not self._courses.get_by_id(course_id):
            raise ValidationError("Course does not exist", field="course_id")
        section = self._sections.get_by_id(section_id)
        if not section:
            raise ValidationError("Section does not exist", field="section_id")
        if section.course_id != course_id:
            raise ValidationError("Section does not belong to the selected course", field="section_id")

    def create_student(self, data: dict) -> StudentWithEnrollment:
        student_number = require_non_empty(data.get("student_number"), "student_number")
        name = require_non_empty(data.get("name"), "name")
        course_id = require_positive_int(data.get("course_id"), "course_id")
        section_id = require_positive_int(data.get("section_id"), "section_id")
        age = require_digits(data["age"], "age") if optional_text(data.get("age")) else None
        email = require_email(data["email"]) if optional_text(data.get("email")) else None

        self._check_enrollment(course_id, section_id)

        if self._students.get_by_student_number(student_number):
            raise ConflictError("Student ID already exists")

        try:
            student_id = self._students.create(
                student_number=student_number,
                name=name,
                course_id=course_id,
                section_id=section_id,
                age=age,
                email=email,
                birthday=optional_text(data.get("birthday")),
            )
        except DuplicateRecordError:
            raise ConflictError("Student ID already exists")

        logger.info("Created student %s (%s)", student_id, student_number)
        return self.get_student(student_id)

    def update_student(self, student_id: int, data: dict) -> StudentWithEnrollment:
        current = self._students.get_by_id(int(student_id))
        if not current:
            raise NotFoundError("Student not found")

        patch: dict[str, Any] = {}
        if "student_number" in data:
            number = require_non_empty(data.get("student_number"), "student_number")
            other = self._students.get_by_student_number(number)
            if other and other.student_id != current.student_id:
                raise ConflictError("Student ID already exists")
            patch["student_number"] = number
        if "name" in data:
            patch["name"] = require_non_empty(data.get("name"), "name")
        if "course_id" in data:
            patch["course_id"] = require_positive_int(data.get("course_id"), "course_id")
        if "section_id" in data:
            patch["section_id"] = require_positive_int(data.get("section_id"), "section_id")
        if "age" in data:
            patch["age"] = require_digits(data["age"], "age") if optional_text(data.get("age")) else None
        if "email" in data:
            patch["email"] = require_email(data["email"]) if optional_text(data.get("email")) else None
        if "birthday" in data:
            patch["birthday"] = optional_text(data.get("birthday"))

        if "course_id" in patch or "section_id" in patch:
            self._check_enrollment(
                patch.get("course_id", current.course_id),
                patch.get("section_id", current.section_id),
            )

        try:
            self._students.update(current.student_id, patch)
        except DuplicateRecordError:
            raise ConflictError("Student ID already exists")
        return self.get_student(current.student_id)

    def delete_student(self, student_id: int) -> None:
        if not self._students.delete(int(student_id)):
            raise NotFoundError("Student not found")
        logger.info("Deleted student %s", student_id)

    # ----- bulk import / export -----

    def import_rows(self, rows: Iterable[dict]) -> ImportSummary:
        """Create students from spreadsheet-like rows.

        Rows missing a required column, failing validation, or reusing an
        existing student number are skipped; the rest are created.
        """

        created = 0
        skipped: list[ImportSkip] = []
        for index, raw in enumerate(rows, start=1):
            row = self._normalize_import_row(raw)
            missing = [f for f in _REQUIRED_IMPORT_FIELDS if not optional_text(row.get(f))]
            if missing:
                skipped.append(ImportSkip(row=index, reason=f"missing {', '.join(missing)}"))
                continue
            try:
                self.create_student(row)
                created += 1
            except (ValidationError, ConflictError) as e:
                skipped.append(ImportSkip(row=index, reason=str(e)))

        logger.info("Student import finished: created=%s skipped=%s", created, len(skipped))
        return ImportSummary(created=created, skipped=skipped)

    def import_file(self, *, filename: str, stream: IO[bytes]) -> ImportSummary:
        name = (filename or "").lower()
        try:
            if name.endswith((".xlsx", ".xls")):
                df = pd.read_excel(stream, dtype=str)
            elif name.endswith(".csv"):
                df = pd.read_csv(stream, dtype=str)
            else:
                raise ValidationError("Only .csv or .xlsx files can be imported", field="file")
        except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError):
            raise ValidationError("Could not read the uploaded spreadsheet", field="file")

        df = df.fillna("")
        return self.import_rows(df.to_dict(orient="records"))

    @staticmethod
    def _normalize_import_row(raw: dict) -> dict:
        row: dict[str, Any] = {}
        for key, value in (raw or {}).items():
            field_name = _IMPORT_ALIASES.get(str(key).strip().lower())
            if field_name and field_name not in row:
                row[field_name] = value.strip() if isinstance(value, str) else value
        return row

    def export_csv(self) -> bytes:
        records = [
            {
                "student_number": r.student.student_number,
                "name": r.student.name,
                "course_id": r.student.course_id,
                "course": r.course.name if r.course else "",
                "section_id": r.student.section_id,
                "section": r.section.name if r.section else "",
                "age": r.student.age if r.student.age is not None else "",
                "email": r.student.email or "",
                "birthday": r.student.birthday or "",
            }
            for r in self._students.list_with_enrollment()
        ]
        columns = ["student_number", "name", "course_id", "course", "section_id", "section", "age", "email", "birthday"]
        out = io.StringIO()
        pd.DataFrame(records, columns=columns).to_csv(out, index=False)
        return out.getvalue().encode("utf-8-sig")

    # ----- student self-service -----

    def get_profile(self, student_number: Optional[str]) -> StudentWithEnrollment:
        joined = self.find_by_number(student_number or "")
        if not joined:
            raise NotFoundError("Student not found")
        return joined

    def update_profile(
        self,
        student_number: Optional[str],
        *,
        age: Any = None,
        email: Optional[str] = None,
        birthday: Optional[str] = None,
        picture: Optional[UploadedPicture] = None,
    ) -> StudentWithEnrollment:
        """Self-service enrichment (also used by registration)."""

        joined = self.get_profile(student_number)
        patch: dict[str, Any] = {}
        if optional_text(age) is not None:
            patch["age"] = require_digits(age, "age")
        if optional_text(email) is not None:
            patch["email"] = require_email(email)
        if optional_text(birthday) is not None:
            patch["birthday"] = optional_text(birthday)
        if picture is not None:
            patch["profile_picture"] = pictures.to_data_url(picture.data, picture.mimetype)

        self._students.update(joined.student.student_id, patch)
        return self.get_student(joined.student.student_id)
