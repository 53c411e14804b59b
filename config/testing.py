import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://api.test"),
    "timeout": 2.0,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
SESSION_DAYS = 1
