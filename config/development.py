import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ops_portal"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Background write workers and the diagnostics error buffer
WRITE_WORKERS = int(os.getenv("WRITE_WORKERS", "4"))
ERROR_BUFFER_SIZE = int(os.getenv("ERROR_BUFFER_SIZE", "50"))

# Clock-out needs an overtime note beyond this many worked hours
OVERTIME_NOTE_HOURS = int(os.getenv("OVERTIME_NOTE_HOURS", "8"))

# Printed permit letter
DOCUMENT_HEADER = tuple(filter(None, os.getenv("DOCUMENT_HEADER", "").split("|")))
DOCUMENT_APPROVER_TITLE = os.getenv("DOCUMENT_APPROVER_TITLE", "Manager")
DOCUMENT_APPROVER_NAME = os.getenv("DOCUMENT_APPROVER_NAME", "")
