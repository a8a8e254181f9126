from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.common.validators import require_digits, require_positive_int
from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError


@pytest.mark.parametrize("value", ["²", "٣", "1²", "-1", "1.5", "", None])
def test_require_digits_accepts_only_ascii_digits(value):
    with pytest.raises(ValidationError) as exc:
        require_digits(value, "age")
    assert exc.value.field == "age"


def test_require_digits_parses_padded_text():
    assert require_digits(" 21 ", "age") == 21


@pytest.mark.parametrize("value", [True, False, 1.9, 0.5, 0, -4, "x", None, "²"])
def test_require_positive_int_rejects(value):
    with pytest.raises(ValidationError) as exc:
        require_positive_int(value, "course_id")
    assert exc.value.field == "course_id"


@pytest.mark.parametrize("value, expected", [(3, 3), ("3", 3), (2.0, 2)])
def test_require_positive_int_accepts(value, expected):
    assert require_positive_int(value, "course_id") == expected
