"""Reverse geocoding of trip endpoints for one sync run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.clients.nominatim import NominatimClient
from core.http.rate_limiting import geocoder_rate_limiter
from gps.schemas import TripLocation

if TYPE_CHECKING:
    from aiolimiter import AsyncLimiter

    from gps.schemas import RawTripRecord

logger = logging.getLogger(__name__)


def coordinate_key(lat: float, lon: float) -> str:
    return f"{lat},{lon}"


def distinct_coordinates(
    trips: list[RawTripRecord],
) -> dict[str, tuple[float, float]]:
    """Distinct start/end coordinates keyed by ``"{lat},{lon}"``, first seen first."""
    coordinates: dict[str, tuple[float, float]] = {}
    for trip in trips:
        for coords in (trip.start_coordinates, trip.end_coordinates):
            if coords is not None:
                coordinates.setdefault(coordinate_key(*coords), coords)
    return coordinates


class GeocodingEnricher:
    """Resolves each distinct coordinate once and annotates the trips.

    Every lookup waits on ``limiter``, the process-wide geocoder rate limiter
    by default, so concurrent runs share one pace. A failed or empty lookup
    resolves to the coordinate key itself, so geocoding never fails a sync.
    """

    def __init__(
        self,
        geocoder: NominatimClient | None = None,
        *,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        self._geocoder = geocoder or NominatimClient()
        self._limiter = limiter if limiter is not None else geocoder_rate_limiter

    async def _lookup(self, key: str, lat: float, lon: float) -> str:
        try:
            address = await self._geocoder.reverse_address(lat, lon)
        except Exception as exc:
            logger.warning("Could not reverse geocode %s: %s", key, exc)
            return key
        if not address:
            logger.debug("No address found for %s", key)
            return key
        return address

    async def resolve(self, trips: list[RawTripRecord]) -> dict[str, str]:
        coordinates = distinct_coordinates(trips)
        addresses: dict[str, str] = {}
        for key, (lat, lon) in coordinates.items():
            async with self._limiter:
                addresses[key] = await self._lookup(key, lat, lon)

        if addresses:
            logger.info(
                "Geocoded %d distinct locations for %d trips",
                len(addresses),
                len(trips),
            )
        return addresses

    async def enrich(self, trips: list[RawTripRecord]) -> dict[str, str]:
        """Attach begin/end locations to ``trips`` and return the address map."""
        addresses = await self.resolve(trips)
        for trip in trips:
            if trip.start_coordinates is not None:
                lat, lon = trip.start_coordinates
                trip.begin_location = TripLocation(
                    latitude=lat,
                    longitude=lon,
                    address=addresses.get(coordinate_key(lat, lon)),
                )
            if trip.end_coordinates is not None:
                lat, lon = trip.end_coordinates
                trip.end_location = TripLocation(
                    latitude=lat,
                    longitude=lon,
                    address=addresses.get(coordinate_key(lat, lon)),
                )
        return addresses


__all__ = ["GeocodingEnricher", "coordinate_key", "distinct_coordinates"]
