import logging
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()
DEBUG = ENVIRONMENT in ["development", "dev"]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if not DEBUG else "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json" if not DEBUG else "text")

# Application
APP_NAME = os.getenv("APP_NAME", "Gym Membership API")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

# Local time zone of the gym; weekday and day-of-month are read in this zone
TIMEZONE = os.getenv("TIMEZONE", "Europe/Madrid")

# Shared secret of the scheduler calling the /cron endpoints
CRON_SECRET = os.getenv("CRON_SECRET")

# Rate limits (slowapi notation)
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
RATE_LIMIT_EVALUATION = os.getenv("RATE_LIMIT_EVALUATION", "30/minute")


def validate_config():
    """Validate configuration on startup"""
    errors = []

    try:
        ZoneInfo(TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"TIMEZONE '{TIMEZONE}' is not a known time zone")

    if LOG_FORMAT.lower() not in ["json", "text"]:
        errors.append("LOG_FORMAT must be 'json' or 'text'")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")

    if not CRON_SECRET:
        logger.warning("CRON_SECRET is not set, /cron endpoints will reject calls")

# Comma-separated list of front-end origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
