"""Runtime configuration for the planner recurrence service."""
import os

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

DEFAULT_SEARCH_HORIZON_DAYS = 3660


def _int_setting(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# How far past a date next_occurrence() looks before giving up
RECURRENCE_SEARCH_HORIZON_DAYS = _int_setting("RECURRENCE_SEARCH_HORIZON_DAYS", DEFAULT_SEARCH_HORIZON_DAYS)
