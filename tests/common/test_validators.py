import pytest

from src.otp_attendance.otp_attendance.common.validators import (
    is_valid_code,
    require_positive_int,
    sanitize_name,
)
from src.otp_attendance.otp_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize("value, expected", [(5, 5), ("12", 12), (7.0, 7)])
def test_require_positive_int_accepts_integral_values(value, expected):
    assert require_positive_int(value, "User ID") == expected


@pytest.mark.parametrize("value", [True, False, 3.9, float("nan"), None, "", "1.5", 0, -1])
def test_require_positive_int_rejects(value):
    with pytest.raises(ValidationError):
        require_positive_int(value, "User ID")


def test_is_valid_code():
    assert is_valid_code("123456")
    assert is_valid_code(" 123 456 ")
    assert not is_valid_code("12345")
    assert not is_valid_code("12a456")


def test_sanitize_name():
    assert sanitize_name("  Budi  <Santoso>!! ") == "Budi Santoso"
    assert len(sanitize_name("x" * 80)) == 50
