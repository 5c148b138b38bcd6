"""
GPS telemetry provider integration.

- token_cache: process-wide bearer token with single-flight login
- trip_client: trip queries with backward window search
- schemas: provider trip DTOs and batch parsing
- tracking_service: pass-through tracking and report actions
"""

from gps.schemas import InvalidTripRecord, RawTripRecord, TripLocation, parse_trip_batch
from gps.token_cache import (
    GpsToken,
    GpsTokenCache,
    TokenProvider,
    get_token_cache,
    reset_token_cache,
)
from gps.tracking_service import GpsTrackingService
from gps.trip_client import GpsTripClient, TripBatch

__all__ = [
    "GpsToken",
    "GpsTokenCache",
    "GpsTrackingService",
    "GpsTripClient",
    "InvalidTripRecord",
    "RawTripRecord",
    "TokenProvider",
    "TripBatch",
    "TripLocation",
    "get_token_cache",
    "parse_trip_batch",
    "reset_token_cache",
]
