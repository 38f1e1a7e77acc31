import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ponto_exato_test"),
}

GEMINI_API_KEY = ""
GEMINI_MODEL = "gemini-3-pro-preview"
GEMINI_AUDIT_MODEL = "gemini-3-flash-preview"

SYNC_POLL_SECONDS = 0.05
SESSION_DAYS = 7

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
