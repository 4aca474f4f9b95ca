import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}
# None keeps the server default (REPEATABLE READ on InnoDB)
DB_ISOLATION_LEVEL = os.getenv("DB_ISOLATION_LEVEL") or None

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Mail queue / delivery. "console" only logs the message.
MAIL_TRANSPORT = os.getenv("MAIL_TRANSPORT", "console")
MAIL_HOST = os.getenv("MAIL_HOST", "localhost")
MAIL_PORT = int(os.getenv("MAIL_PORT", "2525"))
MAIL_USER = os.getenv("MAIL_USER", "")
MAIL_PASS = os.getenv("MAIL_PASS", "")
MAIL_FROM = os.getenv("MAIL_FROM", "attendance@localhost")
MAIL_USE_TLS = bool(int(os.getenv("MAIL_USE_TLS", "0")))
MAIL_MAX_ATTEMPTS = int(os.getenv("MAIL_MAX_ATTEMPTS", "3"))
MAIL_BACKOFF_MS = int(os.getenv("MAIL_BACKOFF_MS", "1000"))
MAIL_POLL_INTERVAL = float(os.getenv("MAIL_POLL_INTERVAL", "1.0"))

# Auth (flask-jwt-extended). Falls back to SECRET_KEY when unset.
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ACCESS_EXPIRES_MINUTES = int(os.getenv("JWT_ACCESS_EXPIRES_MINUTES", "15"))
JWT_REFRESH_EXPIRES_DAYS = int(os.getenv("JWT_REFRESH_EXPIRES_DAYS", "7"))
FRONTEND_RESET_URL = os.getenv("FRONTEND_RESET_URL", "http://localhost:3001/reset-password")
PASSWORD_RESET_TTL_MINUTES = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "15"))
