# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application configuration loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://www.cbr.ru/scripts/XML_daily.asp"

# The feed rejects requests without a browser-like agent
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name} {raw!r}")
        return None


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the rate synchronization service."""

    database_url: str
    feed_url: str
    request_timeout: float
    user_agent: str
    sync_enabled: bool
    sync_time: str
    sync_interval_minutes: int | None
    admin_password: str | None
    auto_create_tables: bool
    log_level: str
    api_host: str
    api_port: int


def load_settings() -> Settings:
    """Read settings from environment variables.

    Unset variables fall back to defaults suitable for local development.
    """
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./currency_rates.db"),
        feed_url=os.getenv("CBR_FEED_URL", DEFAULT_FEED_URL),
        request_timeout=float(os.getenv("CBR_REQUEST_TIMEOUT", "10")),
        user_agent=os.getenv("CBR_USER_AGENT", DEFAULT_USER_AGENT),
        sync_enabled=_env_flag("SYNC_ENABLED", True),
        sync_time=os.getenv("SYNC_TIME", "00:00"),
        sync_interval_minutes=_env_optional_int("SYNC_INTERVAL_MINUTES"),
        admin_password=os.getenv("SYNC_ADMIN_PASSWORD") or None,
        auto_create_tables=_env_flag("AUTO_CREATE_TABLES", True),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=int(os.getenv("API_PORT", "8000")),
    )


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return load_settings()
