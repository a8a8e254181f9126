from __future__ import annotations

import logging
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_digits, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateRecordError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UnknownStudentIdError,
)
from ..students import pictures
from ..students.repository import StudentRepository
from ..students.model import StudentWithEnrollment, UploadedPicture
from .model import AuthenticatedPrincipal, LoginResult, User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: registration, login, token verification and role checks."""

    def __init__(self, users: UserRepository, students: StudentRepository, tokens: TokenService):
        self._users = users
        self._students = students
        self._tokens = tokens

    def register(
        self,
        *,
        student_number: str,
        email: str,
        password: str,
        age: Any,
        birthday: str,
        picture: Optional[UploadedPicture] = None,
    ) -> User:
        """Create a student account against a pre-registered student number.

        All input (including the picture) is validated before anything is
        written, so a rejected registration leaves no partial rows behind.
        """

        student_number = require_non_empty(student_number, "student_number")
        email = require_email(email)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        age_value = require_digits(age, "age")
        birthday = require_non_empty(birthday, "birthday")
        picture_url = pictures.to_data_url(picture.data, picture.mimetype) if picture else None

        student = self._students.get_by_student_number(student_number)
        if not student:
            raise UnknownStudentIdError()

        if self._users.get_by_email(email):
            raise EmailAlreadyRegisteredError()

        password_hash = generate_password_hash(password)
        try:
            user_id = self._users.create_user(
                email=email,
                password_hash=password_hash,
                role=Role.STUDENT,
                student_number=student.student_number,
            )
        except DuplicateRecordError:
            raise EmailAlreadyRegisteredError()

        patch: dict[str, Any] = {"age": age_value, "email": email, "birthday": birthday}
        if picture_url is not None:
            patch["profile_picture"] = picture_url
        self._students.update(student.student_id, patch)

        logger.info("Registered user %s for student %s", user_id, student.student_number)
        return User(
            user_id=user_id,
            email=email,
            password_hash=password_hash,
            role=Role.STUDENT,
            student_number=student.student_number,
        )

    def verify_student_number(self, student_number: str) -> StudentWithEnrollment:
        """Pre-registration lookup: does an admin-created student have this number?"""

        student = self._students.get_by_student_number(require_non_empty(student_number, "student_number"))
        if not student:
            raise UnknownStudentIdError()
        return self._students.get_enrollment(student.student_id)

    def authenticate(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a bearer token.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        """

        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        return LoginResult(token=self._tokens.sign(user.user_id), user=user)

    def principal_from_token(self, token: str) -> AuthenticatedPrincipal:
        user_id = self._tokens.verify(token)
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError("User not found")
        return AuthenticatedPrincipal.from_user(user)

    @staticmethod
    def authorize(principal: AuthenticatedPrincipal, required_role: Role) -> None:
        if principal.role != required_role:
            label = "Admin" if required_role == Role.ADMIN else "Student"
            raise AuthorizationError(f"{label} access required")
