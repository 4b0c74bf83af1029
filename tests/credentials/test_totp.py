from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import parse_qs, unquote, urlparse

import pyotp
import pytest

from src.otp_attendance.otp_attendance.credentials.totp import (
    TOTPService,
    decode_secret,
    derive,
    derive_for_step,
    generate_secret,
    key_uri,
    time_remaining,
    time_step,
    validate_secret,
    verify,
)

# Start of a 30 s step: 1111111080 = 37037036 * 30
STEP_START = 1111111080


@pytest.mark.parametrize(
    "unix_time, expected",
    [
        (59, "287082"),
        (1111111109, "081804"),
        (1111111111, "050471"),
        (1234567890, "005924"),
        (2000000000, "279037"),
        (20000000000, "353130"),
    ],
)
def test_rfc6238_sha1_vectors(secret, unix_time, expected):
    assert derive(secret, unix_time) == expected


def test_leading_zeros_are_kept(secret):
    code = derive(secret, 1234567890)
    assert code == "005924"
    assert len(code) == 6


def test_aware_and_naive_datetimes_match_unix_time(secret, tz):
    aware = datetime(2005, 3, 18, 8, 58, 29, tzinfo=tz)  # 01:58:29 UTC
    naive_utc = datetime(2005, 3, 18, 1, 58, 29)

    assert derive(secret, aware) == "081804"
    assert derive(secret, naive_utc) == "081804"


def test_matches_pyotp_reference():
    for _ in range(5):
        s = generate_secret()
        reference = pyotp.TOTP(s)
        for t in (0, 59, STEP_START, 1700000000, 1893456000):
            assert derive(s, t) == reference.at(t)


def test_derive_for_step_equals_derive_at_step_start(secret):
    assert derive_for_step(secret, time_step(STEP_START)) == derive(secret, STEP_START)
    assert derive_for_step(secret, -1) is None


def test_verify_accepts_current_and_adjacent_steps(secret):
    code = derive(secret, STEP_START)

    assert verify(secret, code, STEP_START)
    assert verify(secret, code, STEP_START + 29)
    assert verify(secret, code, STEP_START - 29)
    assert verify(secret, code, STEP_START + 59)


def test_verify_rejects_two_steps_away(secret):
    code = derive(secret, STEP_START)

    assert not verify(secret, code, STEP_START + 60)
    assert not verify(secret, code, STEP_START + 61)
    assert not verify(secret, code, STEP_START - 31)


def test_verify_normalizes_whitespace(secret):
    assert verify(secret, " 081 804\n", 1111111109)


@pytest.mark.parametrize("candidate", ["", None, "08180", "0818045", "abcdef", "08-804", "０８１８０４"])
def test_verify_rejects_malformed_candidates(secret, candidate):
    assert not verify(secret, candidate, 1111111109)


@pytest.mark.parametrize("bad_secret", ["", "not base32!!", "A", "ABC"])
def test_malformed_secret_fails_closed(bad_secret):
    assert decode_secret(bad_secret) is None
    assert derive(bad_secret, 1111111109) is None
    assert not verify(bad_secret, "081804", 1111111109)


def test_secret_decoding_is_lenient_about_case_spaces_and_padding(secret):
    spaced = "gezd gnbv gy3t qojq gezd gnbv gy3t qojq"
    assert decode_secret(spaced) == b"12345678901234567890"
    assert derive(spaced, 59) == "287082"
    # 16 bytes -> 26 base32 chars without padding
    assert decode_secret("GEZDGNBVGY3TQOJQGEZDGNBVGY") == b"1234567890123456"


def test_validate_secret_requires_sixteen_bytes(secret):
    assert validate_secret(secret)
    assert validate_secret("GEZDGNBVGY3TQOJQGEZDGNBVGY")
    assert not validate_secret("JBSWY3DPEHPK3PXP")  # 10 bytes
    assert not validate_secret("not base32!!")


def test_generate_secret_is_twenty_random_bytes():
    first, second = generate_secret(), generate_secret()

    assert first != second
    assert len(first) == 32
    assert decode_secret(first) is not None
    assert len(decode_secret(first)) == 20


def test_key_uri_carries_all_parameters(secret):
    uri = key_uri(secret, "Employee", "Attendance Bot")
    parsed = urlparse(uri)
    params = parse_qs(parsed.query)

    assert parsed.scheme == "otpauth"
    assert parsed.netloc == "totp"
    assert unquote(parsed.path) == "/Attendance Bot:Employee"
    assert params["secret"] == [secret]
    assert params["issuer"] == ["Attendance Bot"]
    assert params["algorithm"] == ["SHA1"]
    assert params["digits"] == ["6"]
    assert params["period"] == ["30"]


def test_key_uri_is_understood_by_authenticator_libraries(secret):
    otp = pyotp.parse_uri(key_uri(secret, "Employee", "Attendance Bot"))

    assert otp.at(1234567890) == derive(secret, 1234567890)


def test_time_remaining():
    assert time_remaining(STEP_START) == 30
    assert time_remaining(STEP_START + 1) == 29
    assert time_remaining(STEP_START + 29) == 1
    assert time_remaining(datetime.fromtimestamp(STEP_START + 10, tz=timezone.utc)) == 20


def test_service_binds_secret(secret):
    service = TOTPService(secret)

    assert service.is_configured
    assert service.derive(59) == "287082"
    assert service.verify("287082", 59)
    assert not service.verify("287082", 59 + 90)
    assert len(service.derive()) == 6
    assert 1 <= service.time_remaining() <= 30
    assert not TOTPService("bogus").is_configured


def test_verify_agrees_with_pyotp_window(secret):
    reference = pyotp.TOTP(secret)
    code = reference.at(STEP_START)

    for offset in (-61, -31, -29, 0, 29, 59, 60, 61, 89):
        at = STEP_START + offset
        expected = reference.verify(code, for_time=datetime.fromtimestamp(at, tz=timezone.utc), valid_window=1)
        assert verify(secret, code, at) == expected
