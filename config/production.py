import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ops_portal"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

WRITE_WORKERS = int(os.getenv("WRITE_WORKERS", "8"))
ERROR_BUFFER_SIZE = int(os.getenv("ERROR_BUFFER_SIZE", "200"))
OVERTIME_NOTE_HOURS = int(os.getenv("OVERTIME_NOTE_HOURS", "8"))

DOCUMENT_HEADER = tuple(filter(None, os.getenv("DOCUMENT_HEADER", "").split("|")))
DOCUMENT_APPROVER_TITLE = os.getenv("DOCUMENT_APPROVER_TITLE", "Manager")
DOCUMENT_APPROVER_NAME = os.getenv("DOCUMENT_APPROVER_NAME", "")
