"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_DAYS = 7
DEFAULT_SYSTEM_NAME = "Attendance System"
DEFAULT_QR_CODE_ENABLED = True

MIN_PASSWORD_LENGTH = 6
MAX_PICTURE_BYTES = 2 * 1024 * 1024
ALLOWED_PICTURE_MIMES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})

MYSQL_DUPLICATE_KEY_ERRNO = 1062
# 1451: parent row still referenced, 1452: referenced parent row missing
MYSQL_FOREIGN_KEY_ERRNOS = frozenset({1451, 1452})
