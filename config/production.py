import os

from config import PLACEHOLDER_SECRET_KEY

SECRET_KEY = os.getenv("SECRET_KEY", PLACEHOLDER_SECRET_KEY)

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = False
TESTING = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TOKEN_TTL_DAYS = int(os.getenv("TOKEN_TTL_DAYS", "7"))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(2 * 1024 * 1024)))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@attendance.com")
# No default: the admin account is only seeded when a password is provided.
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

REJECT_INACTIVE_EVENT_CHECKIN = bool(int(os.getenv("REJECT_INACTIVE_EVENT_CHECKIN", "0")))
