# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
import re
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_TIME_UNITS = {"s": 1, "m": 60, "h": 3600}


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./orderflow.db"
    redis_url: str | None = None
    order_rate_limit: str = "20/1m"
    stock_alert_cooldown_secs: int = 3600
    order_number_prefix: str = "CMD"
    max_cart_lines: int = 50
    max_line_quantity: int = 100
    alerts_email_provider: str = "orderflow.app.providers.email_stub"
    alerts_slack_provider: str = "orderflow.app.providers.slack_stub"
    slack_webhook_url: str | None = None
    app_url: str = "http://localhost:8000"
    error_dsn: str | None = None
    log_level: str = "INFO"
    db_create_all: bool = False
    env: str | None = None


def parse_limit(value: str, default: tuple[int, int] = (20, 60)) -> tuple[int, int]:
    """Return ``(count, window_secs)`` parsed from strings like ``20/1m``."""

    match = re.fullmatch(r"(\d+)/(\d+)([smh])", value.strip())
    if not match:
        return default
    count, span, unit = match.groups()
    return int(count), int(span) * _TIME_UNITS[unit]


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    when present and fed into :class:`Settings`. Environment variables override
    any values from the JSON file.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    return Settings(**merged)
