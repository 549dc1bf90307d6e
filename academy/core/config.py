import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# DEV default secret. Set ACADEMY_SECRET_KEY in any shared environment.
SECRET_KEY = os.getenv("ACADEMY_SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"

# Absolute session lifetime, no sliding renewal
SESSION_MAX_AGE = timedelta(hours=24)
SESSION_COOKIE_NAME = "academy_session"

BCRYPT_ROUNDS = int(os.getenv("ACADEMY_BCRYPT_ROUNDS", "10"))

DEFAULT_TIMEZONE = "UTC"

DATABASE_URL = os.getenv("ACADEMY_DATABASE_URL", f"sqlite:///{BASE_DIR}/academy.db")

LOG_LEVEL = os.getenv("ACADEMY_LOG_LEVEL", "INFO")
