import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://api:5000"),
    "timeout": float(os.getenv("API_TIMEOUT", "10")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
