import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "brigade_portal"),
}

# DLB (external attendance system) integration
DLB_CONFIG = {
    "base_url": os.getenv("DLB_BASE_URL", "http://localhost:8080"),
    "api_token": os.getenv("DLB_API_TOKEN", ""),
    "webhook_secret": os.getenv("DLB_WEBHOOK_SECRET", "dev-webhook-secret"),
    "timeout": int(os.getenv("DLB_TIMEOUT", "30")),
    "brigade_id": int(os.getenv("BRIGADE_ID", "1")),
}

TRAINING_CONFIG = {
    "region": os.getenv("TRAINING_REGION", "auckland"),
    "weekday": int(os.getenv("TRAINING_WEEKDAY", "0")),
    "time": os.getenv("TRAINING_TIME", "19:00"),
    "duration_hours": float(os.getenv("TRAINING_DURATION_HOURS", "2")),
    "generate_months_ahead": int(os.getenv("TRAINING_MONTHS_AHEAD", "12")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
