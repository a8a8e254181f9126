from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account.

    Note: Plain data object (no DB access). Role never changes after creation.
    """

    user_id: int
    email: str
    password_hash: str
    role: Role
    student_number: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Who is calling, resolved from a bearer token against the current User row."""

    user_id: int
    email: str
    role: Role
    student_number: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedPrincipal":
        return cls(user_id=user.user_id, email=user.email, role=user.role, student_number=user.student_number)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User
