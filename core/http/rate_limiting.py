"""
Rate limiting utilities for outbound calls.

Both bounds are process-wide so separate sync requests share them.
"""

import asyncio

from aiolimiter import AsyncLimiter

from config import GEOCODE_DELAY_SECONDS, GPS_PROVIDER_CONCURRENCY

# Public Nominatim policy: at most one request per GEOCODE_DELAY_SECONDS
geocoder_rate_limiter = AsyncLimiter(1, GEOCODE_DELAY_SECONDS)

provider_semaphore = asyncio.Semaphore(GPS_PROVIDER_CONCURRENCY)
