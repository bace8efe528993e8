import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

SMTP_CONFIG = {
    "host": "localhost",
    "port": 1025,
    "user": "",
    "password": "",
    "from_name": "School System (test)",
}

ACADEMIC_YEAR_START_MONTH = 4
ADMIN_EDIT_WINDOW_DAYS = 31

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
