import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_pass"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SCAN_AUTO_APPROVE = bool(int(os.getenv("SCAN_AUTO_APPROVE", "1")))

REQUEST_CACHE_TTL_SECONDS = float(os.getenv("REQUEST_CACHE_TTL_SECONDS", "30"))
REQUEST_CACHE_MAX_SIZE = int(os.getenv("REQUEST_CACHE_MAX_SIZE", "512"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
