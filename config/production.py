import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "otp_attendance"),
}

TOTP_SECRET = os.getenv("TOTP_SECRET", "")
TOTP_ISSUER = os.getenv("TOTP_ISSUER", "Attendance Bot")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Jakarta")
LATE_HOUR = int(os.getenv("LATE_HOUR", "9"))
HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "30"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
