"""Centralized configuration for environment variables and external APIs.

This module is the single source of truth for configuration used across the
application. Import constants from here rather than calling os.getenv directly
in multiple places.

NOTE: GPS provider credentials are only ever read from the environment. Use
get_gps_config() for runtime credential access so tests can override them.
"""

from __future__ import annotations

import os
from typing import Any, Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int_set(name: str, default: str) -> frozenset[int]:
    values = set()
    for item in os.getenv(name, default).split(","):
        item = item.strip()
        if item.lstrip("-").isdigit():
            values.add(int(item))
    return frozenset(values)


# --- GPS telemetry provider ---
GPS_BASE_URL: Final[str] = os.getenv("GPS_BASE_URL", "https://api.gps51.com").rstrip(
    "/"
)
GPS_USERNAME: Final[str | None] = os.getenv("GPS_USERNAME")
GPS_PASSWORD: Final[str | None] = os.getenv("GPS_PASSWORD")
# Sent as the "browser" field of the login payload
GPS_CLIENT_ID: Final[str] = os.getenv("GPS_CLIENT_ID", "JournalSync")
# Hour offset the provider uses when bucketing trips
GPS_TIMEZONE_OFFSET: Final[int] = int(os.getenv("GPS_TIMEZONE_OFFSET", "1"))
# Provider tokens live ~24h; refresh an hour early
GPS_TOKEN_TTL_SECONDS: Final[int] = int(
    os.getenv("GPS_TOKEN_TTL_SECONDS", str(23 * 60 * 60))
)
# Provider status codes meaning "token expired or revoked"
GPS_TOKEN_REJECTED_STATUSES: Final[frozenset[int]] = _env_int_set(
    "GPS_TOKEN_REJECTED_STATUSES",
    "9902,9903",
)
GPS_PROVIDER_CONCURRENCY: Final[int] = max(
    1,
    int(os.getenv("GPS_PROVIDER_CONCURRENCY", "2")),
)

# --- Geocoding ---
NOMINATIM_REVERSE_URL: Final[str] = os.getenv(
    "NOMINATIM_REVERSE_URL",
    "https://nominatim.openstreetmap.org/reverse",
)
NOMINATIM_USER_AGENT: Final[str] = os.getenv(
    "NOMINATIM_USER_AGENT",
    "JournalSync-GPS/1.0",
)
# Public Nominatim allows 1 req/s; keep a margin
GEOCODE_DELAY_SECONDS: Final[float] = float(os.getenv("GEOCODE_DELAY_SECONDS", "1.1"))
GEOCODE_TRIPS_ON_SYNC: Final[bool] = _env_bool("GEOCODE_TRIPS_ON_SYNC", True)

# --- Application ---
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


def get_gps_config() -> dict[str, Any]:
    """Get GPS provider configuration from the environment.

    Returns:
        Dictionary containing:
            - base_url: str
            - username: str
            - password: str
            - client_id: str
            - timezone_offset: int
    """
    return {
        "base_url": os.getenv("GPS_BASE_URL", GPS_BASE_URL).rstrip("/"),
        "username": os.getenv("GPS_USERNAME", GPS_USERNAME or "") or "",
        "password": os.getenv("GPS_PASSWORD", GPS_PASSWORD or "") or "",
        "client_id": GPS_CLIENT_ID,
        "timezone_offset": GPS_TIMEZONE_OFFSET,
    }


def get_nominatim_reverse_url() -> str:
    return NOMINATIM_REVERSE_URL


def get_nominatim_user_agent() -> str:
    return NOMINATIM_USER_AGENT


__all__ = [
    "GEOCODE_DELAY_SECONDS",
    "GEOCODE_TRIPS_ON_SYNC",
    "GPS_BASE_URL",
    "GPS_CLIENT_ID",
    "GPS_PASSWORD",
    "GPS_PROVIDER_CONCURRENCY",
    "GPS_TIMEZONE_OFFSET",
    "GPS_TOKEN_REJECTED_STATUSES",
    "GPS_TOKEN_TTL_SECONDS",
    "GPS_USERNAME",
    "LOG_LEVEL",
    "NOMINATIM_REVERSE_URL",
    "NOMINATIM_USER_AGENT",
    "get_gps_config",
    "get_nominatim_reverse_url",
    "get_nominatim_user_agent",
]
