import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ops_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

WRITE_WORKERS = 2
ERROR_BUFFER_SIZE = 20
OVERTIME_NOTE_HOURS = 8

DOCUMENT_HEADER = ("OPS PORTAL",)
DOCUMENT_APPROVER_TITLE = "Manager"
DOCUMENT_APPROVER_NAME = ""
