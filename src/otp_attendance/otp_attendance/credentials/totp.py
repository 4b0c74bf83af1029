"""Time-based one-time passwords (RFC 6238, HMAC-SHA1, 6 digits, 30 s).

The module functions are pure: they take the secret and the instant
explicitly. ``TOTPService`` binds a configured secret for the service layer.

Malformed secrets never raise here: derivation returns ``None`` and
verification returns ``False``.
"""

from __future__ import annotations

import binascii
import math
from datetime import datetime, timezone
from typing import Optional, Union
from urllib.parse import urlencode

import pyotp

from ..common.validators import is_valid_code, normalize_code
from ..core.constants import (
    MIN_SECRET_BYTES,
    TOTP_ALGORITHM,
    TOTP_DIGITS,
    TOTP_PERIOD_SECONDS,
    TOTP_SECRET_BYTES,
    TOTP_VERIFY_WINDOW,
)

Instant = Union[datetime, int, float]


def _unix_seconds(instant: Instant) -> int:
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return math.floor(instant.timestamp())
    return math.floor(instant)


def _as_utc(instant: Instant) -> datetime:
    # pyotp reads naive datetimes as machine-local time; always hand it UTC.
    return datetime.fromtimestamp(_unix_seconds(instant), tz=timezone.utc)


def _clean_secret(secret: Optional[str]) -> str:
    if not secret:
        return ""
    return "".join(secret.split()).upper().rstrip("=")


def _totp(secret: Optional[str]) -> Optional[pyotp.TOTP]:
    cleaned = _clean_secret(secret)
    if not cleaned:
        return None
    otp = pyotp.TOTP(cleaned, digits=TOTP_DIGITS, interval=TOTP_PERIOD_SECONDS)
    try:
        otp.byte_secret()
    except (binascii.Error, ValueError):
        return None
    return otp


def decode_secret(secret: Optional[str]) -> Optional[bytes]:
    """Base32-decode a secret; tolerant of case, spaces and missing padding."""
    otp = _totp(secret)
    return otp.byte_secret() if otp is not None else None


def validate_secret(secret: Optional[str]) -> bool:
    key = decode_secret(secret)
    return key is not None and len(key) >= MIN_SECRET_BYTES


def time_step(instant: Instant) -> int:
    return _unix_seconds(instant) // TOTP_PERIOD_SECONDS


def derive_for_step(secret: str, counter: int) -> Optional[str]:
    otp = _totp(secret)
    if otp is None or counter < 0:
        return None
    return otp.generate_otp(counter)


def derive(secret: str, instant: Instant) -> Optional[str]:
    """Code for the 30-second step containing ``instant``."""
    otp = _totp(secret)
    if otp is None:
        return None
    return otp.at(_as_utc(instant))


def verify(secret: str, candidate: Optional[str], now: Instant) -> bool:
    """Accept a code from the current step or either neighbour.

    No replay tracking: a code stays acceptable for as long as its step is
    within the window.
    """
    if not is_valid_code(candidate):
        return False
    otp = _totp(secret)
    if otp is None:
        return False
    try:
        return otp.verify(normalize_code(candidate), for_time=_as_utc(now), valid_window=TOTP_VERIFY_WINDOW)
    except ValueError:
        # the window reaches before the epoch
        return False


def generate_secret() -> str:
    """Fresh 160-bit secret as unpadded base32, ready for authenticator apps."""
    return pyotp.random_base32(length=math.ceil(TOTP_SECRET_BYTES * 8 / 5))


def key_uri(secret: str, account: str, issuer: str) -> str:
    """``otpauth://`` provisioning URI for QR codes.

    pyotp leaves out parameters at their default values; some authenticator
    apps want them spelled out, so they are appended.
    """
    uri = pyotp.TOTP(_clean_secret(secret)).provisioning_uri(name=account, issuer_name=issuer)
    extra = urlencode({"algorithm": TOTP_ALGORITHM, "digits": TOTP_DIGITS, "period": TOTP_PERIOD_SECONDS})
    return f"{uri}&{extra}"


def time_remaining(now: Instant) -> int:
    return TOTP_PERIOD_SECONDS - (_unix_seconds(now) % TOTP_PERIOD_SECONDS)


class TOTPService:
    """TOTP bound to the deployment's shared secret."""

    def __init__(self, secret: str):
        self._secret = secret

    @property
    def is_configured(self) -> bool:
        return validate_secret(self._secret)

    def derive(self, now: Optional[Instant] = None) -> Optional[str]:
        return derive(self._secret, _now_or(now))

    def verify(self, candidate: Optional[str], now: Optional[Instant] = None) -> bool:
        return verify(self._secret, candidate, _now_or(now))

    def key_uri(self, account: str, issuer: str) -> str:
        return key_uri(self._secret, account, issuer)

    def time_remaining(self, now: Optional[Instant] = None) -> int:
        return time_remaining(_now_or(now))


def _now_or(now: Optional[Instant]) -> Instant:
    return datetime.now(timezone.utc) if now is None else now
