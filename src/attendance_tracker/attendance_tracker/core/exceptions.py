from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(DomainError):
    """Raised when the caller cannot be identified (missing/invalid/expired token)."""


class InvalidCredentialsError(AuthenticationError):
    """Raised for any failed login. Never says whether the email exists."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class UnknownStudentIdError(NotFoundError):
    def __init__(self, message: str = "Student ID not found in system"):
        super().__init__(message)


class ConflictError(DomainError):
    """Raised when the request conflicts with the current state of a record."""


class AlreadyCompleteError(ConflictError):
    def __init__(self, message: str = "Attendance already complete"):
        super().__init__(message)


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class DuplicateRecordError(ConflictError):
    """Raised by repositories when an insert hits a unique key."""


class ReferencedRecordError(ConflictError):
    """Raised by repositories when a write breaks a foreign key (row still referenced, or parent missing)."""
