import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_test"),
}
DB_ISOLATION_LEVEL = None

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MAIL_TRANSPORT = "console"
MAIL_HOST = ""
MAIL_PORT = 2525
MAIL_USER = ""
MAIL_PASS = ""
MAIL_FROM = "attendance@test.local"
MAIL_USE_TLS = False
MAIL_MAX_ATTEMPTS = 3
MAIL_BACKOFF_MS = 1000
MAIL_POLL_INTERVAL = 0.1

# Auth (flask-jwt-extended). Falls back to SECRET_KEY when unset.
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ACCESS_EXPIRES_MINUTES = int(os.getenv("JWT_ACCESS_EXPIRES_MINUTES", "15"))
JWT_REFRESH_EXPIRES_DAYS = int(os.getenv("JWT_REFRESH_EXPIRES_DAYS", "7"))
FRONTEND_RESET_URL = os.getenv("FRONTEND_RESET_URL", "http://localhost:3001/reset-password")
PASSWORD_RESET_TTL_MINUTES = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "15"))
