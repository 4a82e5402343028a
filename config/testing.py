import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_pass_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SCAN_AUTO_APPROVE = True

REQUEST_CACHE_TTL_SECONDS = 30
REQUEST_CACHE_MAX_SIZE = 64

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
