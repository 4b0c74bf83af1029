import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "otp_attendance"),
}

# Shared TOTP secret (base32). Generate one with scripts/setup_totp.py
TOTP_SECRET = os.getenv("TOTP_SECRET", "")
TOTP_ISSUER = os.getenv("TOTP_ISSUER", "Attendance Bot")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Jakarta")
LATE_HOUR = int(os.getenv("LATE_HOUR", "9"))
HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "30"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
