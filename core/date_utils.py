"""
Date and time helpers.

All timestamps are handled as timezone-aware UTC datetimes. The GPS provider
speaks epoch seconds; storage and the HTTP API speak ISO 8601.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from dateutil import parser

logger = logging.getLogger(__name__)


def get_current_utc_time() -> datetime:
    """Return the current time as a timezone-aware datetime object in UTC."""
    return datetime.now(UTC)


def parse_timestamp(ts: str | datetime | None) -> datetime | None:
    """
    Parse a timestamp string (or datetime object) and ensure it is
    timezone-aware, defaulting to UTC.

    Returns:
        A timezone-aware datetime object, or None if parsing fails.
    """
    if not ts:
        return None

    if isinstance(ts, datetime):
        return ensure_utc(ts)

    try:
        parsed_time = parser.isoparse(ts)
    except (ValueError, TypeError) as e:
        logger.warning("Failed to parse timestamp '%s': %s", ts, e)
        return None
    return ensure_utc(parsed_time)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return the datetime as an explicit UTC-aware value."""

    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_epoch_seconds(dt: datetime) -> int:
    utc = ensure_utc(dt) or dt
    return int(utc.timestamp())


def from_epoch_seconds(seconds: int | float) -> datetime:
    return datetime.fromtimestamp(seconds, UTC)


def to_epoch_ms(dt: datetime) -> int:
    utc = ensure_utc(dt) or dt
    return int(utc.timestamp() * 1000)
