import os

from dotenv import load_dotenv

# Load variables from a local .env file, if any
load_dotenv()


def _float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    """Settings read from the environment. create_app() overrides win over these."""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    # empty -> memory only
    DATA_PATH = os.getenv("DATA_PATH", "")
    STORAGE_TIMEOUT = _float("STORAGE_TIMEOUT", 5.0)
    APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin123")
    PAYMENT_WEBHOOK_SECRET = os.getenv("PAYMENT_WEBHOOK_SECRET", "")
