"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOTP_PERIOD_SECONDS = 30
TOTP_DIGITS = 6
TOTP_ALGORITHM = "SHA1"
TOTP_VERIFY_WINDOW = 1
TOTP_SECRET_BYTES = 20
MIN_SECRET_BYTES = 16

DEFAULT_TIMEZONE = "Asia/Jakarta"
FALLBACK_UTC_OFFSET_HOURS = 7
DEFAULT_LATE_HOUR = 9
DEFAULT_HISTORY_DAYS = 30
DEFAULT_ISSUER = "Attendance Bot"

MAX_NAME_LENGTH = 50
