import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

HR_BACKEND = os.getenv("HR_BACKEND", "mysql").lower()

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shiftbook"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

BULK_MAX_WORKERS = int(os.getenv("BULK_MAX_WORKERS", "8"))
PAY_PERIOD_ANCHOR = os.getenv("PAY_PERIOD_ANCHOR", "2024-01-07")
