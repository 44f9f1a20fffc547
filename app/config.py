"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files, resolve_optional_database_url


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated list from environment variables with fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class AppSettings:
    """
    Process-wide settings for the upload API.

    ``database_url`` is None when persistence is not configured; the KPI
    pipeline works either way.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    currency_symbol: str = "£"
    sample_size: int = 5
    top_sku_limit: int = 5
    database_url: str | None = None
    sales_insert_batch_size: int = 1000
    cors_allow_origins: tuple[str, ...] = ("*",)

    @property
    def persistence_enabled(self) -> bool:
        return self.database_url is not None


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings from environment variables.
    """

    _load_env_once()
    return AppSettings(
        host=_get_str_env("HOST", "0.0.0.0"),
        port=max(1, _get_int_env("PORT", 3000)),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
        currency_symbol=_get_str_env("CURRENCY_SYMBOL", "£"),
        sample_size=max(0, _get_int_env("UPLOAD_SAMPLE_SIZE", 5)),
        top_sku_limit=max(1, _get_int_env("TOP_SKU_LIMIT", 5)),
        database_url=resolve_optional_database_url(),
        sales_insert_batch_size=max(1, _get_int_env("SALES_INSERT_BATCH_SIZE", 1000)),
        cors_allow_origins=_get_csv_env("CORS_ALLOW_ORIGINS", ("*",)),
    )
