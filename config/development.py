import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ponto_exato"),
}

# Gemini (assistente de RH e auditoria CLT)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-pro-preview")
GEMINI_AUDIT_MODEL = os.getenv("GEMINI_AUDIT_MODEL", "gemini-3-flash-preview")

# Interval between snapshot reads of each synchronized collection
SYNC_POLL_SECONDS = float(os.getenv("SYNC_POLL_SECONDS", "2"))
# Lifetime of a "remember me" session
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo company on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
