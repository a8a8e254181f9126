import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = True
TESTING = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Bearer tokens stay valid this many days after login.
TOKEN_TTL_DAYS = int(os.getenv("TOKEN_TTL_DAYS", "7"))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(2 * 1024 * 1024)))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed sample courses and the admin account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@attendance.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

REJECT_INACTIVE_EVENT_CHECKIN = bool(int(os.getenv("REJECT_INACTIVE_EVENT_CHECKIN", "0")))
