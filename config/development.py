import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Remote absence API (system of record)
API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://127.0.0.1:5000"),
    "timeout": float(os.getenv("API_TIMEOUT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
