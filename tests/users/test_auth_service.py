from __future__ import annotations

import io
from datetime import timedelta

import pytest
from PIL import Image
from werkzeug.security import generate_password_hash

from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UnknownStudentIdError,
    ValidationError,
)
from src.attendance_tracker.attendance_tracker.students.model import UploadedPicture
from src.attendance_tracker.attendance_tracker.users.model import AuthenticatedPrincipal
from src.attendance_tracker.attendance_tracker.users.service import AuthService
from src.attendance_tracker.attendance_tracker.users.tokens import TokenService
from tests.fakes import build_fake_container, seed_enrollment


@pytest.fixture
def ctx():
    c = build_fake_container()
    return c, seed_enrollment(c)


def _register(c, **overrides):
    data = dict(student_number="S1", email="Ana@Example.com", password="secret1", age="20", birthday="2006-01-01")
    data.update(overrides)
    return c.auth_service.register(**data)


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), "red").save(buf, format="PNG")
    return buf.getvalue()


def test_register_enriches_student_and_allows_login(ctx):
    c, ids = ctx

    user = _register(c)
    result = c.auth_service.authenticate("ana@example.com", "secret1")

    assert user.role == Role.STUDENT
    assert user.student_number == "S1"
    assert result.user.user_id == user.user_id
    assert result.token
    student = c.students_repo.get_by_id(ids["s1"])
    assert (student.age, student.email, student.birthday) == (20, "ana@example.com", "2006-01-01")


def test_register_stores_hashed_password(ctx):
    c, _ = ctx

    user = _register(c)

    assert user.password_hash != "secret1"


def test_register_with_picture_stores_data_url(ctx):
    c, ids = ctx

    _register(c, picture=UploadedPicture(data=_png_bytes(), mimetype="image/png"))

    assert c.students_repo.get_by_id(ids["s1"]).profile_picture.startswith("data:image/png;base64,")


def test_register_rejects_unsupported_picture_before_writing(ctx):
    c, ids = ctx

    with pytest.raises(ValidationError):
        _register(c, picture=UploadedPicture(data=b"GIF89a", mimetype="image/gif"))

    assert c.users_repo.rows == {}
    assert c.students_repo.get_by_id(ids["s1"]).email is None


def test_register_unknown_student_number(ctx):
    c, _ = ctx

    with pytest.raises(UnknownStudentIdError):
        _register(c, student_number="S404")


def test_register_duplicate_email(ctx):
    c, _ = ctx
    _register(c)

    with pytest.raises(EmailAlreadyRegisteredError):
        _register(c, student_number="S2", email="ana@example.com")


@pytest.mark.parametrize(
    "field,value",
    [("email", "not-an-email"), ("password", "12345"), ("age", "twenty"), ("age", "\u00b2"), ("birthday", "")],
)
def test_register_validation(ctx, field, value):
    c, _ = ctx

    with pytest.raises(ValidationError) as exc:
        _register(c, **{field: value})
    assert exc.value.field == field


def test_invalid_credentials_are_indistinguishable(ctx):
    c, _ = ctx
    _register(c)

    with pytest.raises(InvalidCredentialsError) as unknown:
        c.auth_service.authenticate("ghost@example.com", "secret1")
    with pytest.raises(InvalidCredentialsError) as wrong:
        c.auth_service.authenticate("ana@example.com", "wrong-password")

    assert str(unknown.value) == str(wrong.value) == "Invalid credentials"
    assert type(unknown.value) is type(wrong.value)


def test_token_round_trip_reads_current_user(ctx):
    c, _ = ctx
    c.users_repo.create_user(
        email="admin@attendance.com", password_hash=generate_password_hash("admin123"), role=Role.ADMIN
    )
    token = c.auth_service.authenticate("admin@attendance.com", "admin123").token

    principal = c.auth_service.principal_from_token(token)

    assert principal.role == Role.ADMIN
    assert principal.email == "admin@attendance.com"


def test_token_for_deleted_user_is_rejected(ctx):
    c, _ = ctx
    _register(c)
    token = c.auth_service.authenticate("ana@example.com", "secret1").token
    c.users_repo.rows.clear()

    with pytest.raises(AuthenticationError):
        c.auth_service.principal_from_token(token)


def test_expired_token_is_rejected():
    tokens = TokenService("k", ttl=timedelta(seconds=-1))

    with pytest.raises(AuthenticationError) as exc:
        tokens.verify(tokens.sign(1))
    assert str(exc.value) == "Token expired"


def test_tampered_token_is_rejected():
    tokens = TokenService("k")
    token = tokens.sign(1)

    with pytest.raises(AuthenticationError):
        tokens.verify(token[:-2] + ("A" if token[-2] != "A" else "B") + token[-1])
    with pytest.raises(AuthenticationError):
        TokenService("other-key").verify(token)


def test_empty_token_is_rejected():
    with pytest.raises(AuthenticationError):
        TokenService("k").verify("")


def test_authorize_is_role_exact():
    admin = AuthenticatedPrincipal(user_id=1, email="a@x.io", role=Role.ADMIN)
    student = AuthenticatedPrincipal(user_id=2, email="s@x.io", role=Role.STUDENT, student_number="S1")

    AuthService.authorize(admin, Role.ADMIN)
    AuthService.authorize(student, Role.STUDENT)
    with pytest.raises(AuthorizationError):
        AuthService.authorize(student, Role.ADMIN)
    with pytest.raises(AuthorizationError):
        AuthService.authorize(admin, Role.STUDENT)


def test_verify_student_number(ctx):
    c, ids = ctx

    assert c.auth_service.verify_student_number("S2").student.student_id == ids["s2"]
    with pytest.raises(UnknownStudentIdError):
        c.auth_service.verify_student_number("S9")
