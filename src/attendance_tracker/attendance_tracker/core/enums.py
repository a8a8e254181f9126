from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization. Closed set: no other roles exist."""

    ADMIN = "admin"
    STUDENT = "student"


class AttendanceState(str, Enum):
    """Per (event, student) attendance state. Transitions only move forward."""

    ABSENT = "ABSENT"
    PRESENT_IN = "PRESENT_IN"
    PRESENT_OUT = "PRESENT_OUT"


class CheckInType(str, Enum):
    """What a single check-in call did."""

    IN = "in"
    OUT = "out"
