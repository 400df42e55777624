import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_roster_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

ROSTER_WINDOW_DAYS = 30
TEMPLATE_EDIT_POLICY = "frozen"

LOG_LEVEL = "WARNING"
LOG_JSON = False
