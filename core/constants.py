"""Global constants for the core package.

This module contains shared constants used across the application core.
"""

from typing import Final

# HTTP Client Constants
HTTP_CONNECTION_LIMIT: Final[int] = 10
HTTP_TIMEOUT_CONNECT: Final[float] = 10.0
HTTP_TIMEOUT_SOCK_READ: Final[float] = 60.0
HTTP_TIMEOUT_TOTAL: Final[float] = 300.0

# Trip matching
TRIP_MATCH_WINDOW_MS: Final[int] = 5 * 60 * 1000

# Anomaly thresholds
LONG_TRIP_KM: Final[float] = 500.0
LONG_TRIP_MINUTES: Final[int] = 12 * 60

# Trip window search
BACKWARD_SEARCH_STEP_DAYS: Final[int] = 7
BACKWARD_SEARCH_MAX_DAYS: Final[int] = 90
BULK_SYNC_LOOKBACK_DAYS: Final[int] = 90
