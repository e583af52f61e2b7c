"""
Settings read from the environment (or a local .env file).

MASTERMIND_HISTORY_FILE  JSON archive path              (default: history.json)
DATABASE_URL             SQL archive instead of the file (default: unset)
MASTERMIND_API_URL       remote service for the online client
MASTERMIND_API_TIMEOUT   seconds per HTTP request
MASTERMIND_LOG_LEVEL     logging level name
APP_ENV                  "local" auto-creates SQL tables
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .types import Backend

# Load env vars from .env if present
load_dotenv()

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_HISTORY_FILE = "history.json"
DEFAULT_API_TIMEOUT = 5.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    history_file: str = DEFAULT_HISTORY_FILE
    database_url: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    log_level: str = "WARNING"
    app_env: str = "local"

    @property
    def archive_backend(self) -> Backend:
        return "sql" if self.database_url else "json"


def _timeout_from_env() -> float:
    raw = os.getenv("MASTERMIND_API_TIMEOUT")
    if not raw:
        return DEFAULT_API_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        logger.warning("Ignoring MASTERMIND_API_TIMEOUT=%r, using %s", raw, DEFAULT_API_TIMEOUT)
        return DEFAULT_API_TIMEOUT
    return timeout


def get_settings() -> Settings:
    # Read at call time so tests (and .env changes) are picked up
    return Settings(
        history_file=os.getenv("MASTERMIND_HISTORY_FILE") or DEFAULT_HISTORY_FILE,
        database_url=os.getenv("DATABASE_URL") or None,
        api_url=os.getenv("MASTERMIND_API_URL", DEFAULT_API_URL),
        api_timeout=_timeout_from_env(),
        log_level=os.getenv("MASTERMIND_LOG_LEVEL", "WARNING").upper(),
        app_env=os.getenv("APP_ENV", "local"),
    )
