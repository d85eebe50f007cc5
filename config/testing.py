import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "brigade_portal_test"),
}

DLB_CONFIG = {
    "base_url": "http://dlb.test",
    "api_token": "test-token",
    "webhook_secret": "test-webhook-secret",
    "timeout": 5,
    "brigade_id": 1,
}

TRAINING_CONFIG = {
    "region": "auckland",
    "weekday": 0,
    "time": "19:00",
    "duration_hours": 2,
    "generate_months_ahead": 12,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
