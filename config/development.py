import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_pass"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Scanning a pending pass approves it and marks the student IN.
# Set to 0 to require explicit warden approval before any scan succeeds.
SCAN_AUTO_APPROVE = bool(int(os.getenv("SCAN_AUTO_APPROVE", "1")))

REQUEST_CACHE_TTL_SECONDS = float(os.getenv("REQUEST_CACHE_TTL_SECONDS", "30"))
REQUEST_CACHE_MAX_SIZE = int(os.getenv("REQUEST_CACHE_MAX_SIZE", "512"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo student/warden/security accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
