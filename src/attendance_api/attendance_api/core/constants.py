"""Constants and defaults."""

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

MAIL_JOB_SEND_ATTENDANCE_NOTIFICATION = "sendAttendanceNotification"
DEFAULT_MAIL_ATTEMPTS = 3
DEFAULT_MAIL_BACKOFF_MS = 1000
DEFAULT_MAIL_KEEP_FINISHED = 100

DATE_FORMAT = "%Y-%m-%d"

MAIL_JOB_SEND_RESET_PASSWORD_EMAIL = "sendResetPasswordEmail"

PASSWORD_MIN_LENGTH = 8
RESET_TOKEN_TTL_MINUTES = 15
JWT_ACCESS_EXPIRES_MINUTES = 15
JWT_REFRESH_EXPIRES_DAYS = 7
DEFAULT_RESET_URL = "http://localhost:3001/reset-password"
