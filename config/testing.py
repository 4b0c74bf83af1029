import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "otp_attendance_test"),
}

# RFC 6238 reference key ("12345678901234567890")
TOTP_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
TOTP_ISSUER = "Attendance Bot"
ADMIN_PASSWORD = "admin-test-password"

TIMEZONE = "Asia/Jakarta"
LATE_HOUR = 9
HISTORY_DAYS = 30

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
