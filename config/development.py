import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_roster"),
}

DEBUG = True

# If enabled, app applies database/schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Days of classes generated ahead of today for the attendance list
ROSTER_WINDOW_DAYS = int(os.getenv("ROSTER_WINDOW_DAYS", "30"))
# frozen: saved lists keep their time/capacity; inherit: follow template edits
TEMPLATE_EDIT_POLICY = os.getenv("TEMPLATE_EDIT_POLICY", "frozen")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))
