import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "memory" runs on generated demo data; "mysql" uses DB_CONFIG.
HR_BACKEND = os.getenv("HR_BACKEND", "memory").lower()

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shiftbook"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled (mysql backend), app applies database/schema.sql on startup (idempotent).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Seed the demo business when it has no employees yet.
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

BULK_MAX_WORKERS = int(os.getenv("BULK_MAX_WORKERS", "4"))
# First day of some pay period; every period is 14 days from here.
PAY_PERIOD_ANCHOR = os.getenv("PAY_PERIOD_ANCHOR", "2024-01-07")
