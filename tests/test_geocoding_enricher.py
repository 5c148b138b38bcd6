import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiolimiter import AsyncLimiter

from config import GEOCODE_DELAY_SECONDS
from core.exceptions import ExternalServiceError
from core.http.rate_limiting import geocoder_rate_limiter
from gps.schemas import RawTripRecord
from journal.services.geocoding import GeocodingEnricher, distinct_coordinates

POINTS = [(59.3, 18.0), (59.4, 18.1), (59.5, 18.2)]


def _unlimited() -> AsyncLimiter:
    return AsyncLimiter(1000, 1)


def _trip(index: int, start: tuple, end: tuple) -> RawTripRecord:
    return RawTripRecord.parse(
        {
            "tripid": f"T{index}",
            "begintime": 1700000000 + index * 7200,
            "endtime": 1700003600 + index * 7200,
            "slat": start[0],
            "slon": start[1],
            "elat": end[0],
            "elon": end[1],
        },
    )


def _geocoder(**addresses: str) -> MagicMock:
    async def reverse_address(lat, lon):
        return addresses.get(f"{lat},{lon}")

    geocoder = MagicMock()
    geocoder.reverse_address = AsyncMock(side_effect=reverse_address)
    return geocoder


@pytest.mark.asyncio
async def test_ten_trips_over_three_points_issue_three_lookups() -> None:
    trips = [
        _trip(i, POINTS[i % 3], POINTS[(i + 1) % 3])
        for i in range(10)
    ]
    geocoder = _geocoder()
    enricher = GeocodingEnricher(geocoder, limiter=_unlimited())

    addresses = await enricher.enrich(trips)

    assert geocoder.reverse_address.await_count == 3
    assert list(addresses) == ["59.3,18.0", "59.4,18.1", "59.5,18.2"]


@pytest.mark.asyncio
async def test_locations_are_attached_from_resolved_addresses() -> None:
    trip = _trip(0, POINTS[0], POINTS[1])
    geocoder = MagicMock()
    geocoder.reverse_address = AsyncMock(
        side_effect=["Storgatan 1, Stockholm", "Kungsgatan 2, Uppsala"],
    )
    enricher = GeocodingEnricher(geocoder, limiter=_unlimited())

    await enricher.enrich([trip])

    assert trip.begin_location.model_dump() == {
        "latitude": 59.3,
        "longitude": 18.0,
        "address": "Storgatan 1, Stockholm",
    }
    assert trip.end_location.address == "Kungsgatan 2, Uppsala"


@pytest.mark.asyncio
async def test_failed_or_empty_lookup_falls_back_to_coordinates() -> None:
    trip = _trip(0, POINTS[0], POINTS[1])
    geocoder = MagicMock()
    geocoder.reverse_address = AsyncMock(
        side_effect=[ExternalServiceError("Nominatim reverse error: 503"), None],
    )
    enricher = GeocodingEnricher(geocoder, limiter=_unlimited())

    addresses = await enricher.enrich([trip])

    assert addresses == {"59.3,18.0": "59.3,18.0", "59.4,18.1": "59.4,18.1"}
    assert trip.begin_location.address == "59.3,18.0"
    assert trip.end_location.address == "59.4,18.1"


@pytest.mark.asyncio
async def test_trips_without_coordinates_are_not_geocoded() -> None:
    trip = RawTripRecord.parse({"tripid": "T1", "begintime": 1, "endtime": 2})
    geocoder = _geocoder()
    enricher = GeocodingEnricher(geocoder, limiter=_unlimited())

    assert await enricher.enrich([trip]) == {}
    geocoder.reverse_address.assert_not_awaited()
    assert trip.begin_location is None


def test_distinct_coordinates_keep_first_seen_order() -> None:
    trips = [_trip(0, POINTS[2], POINTS[0]), _trip(1, POINTS[0], POINTS[1])]

    assert list(distinct_coordinates(trips)) == ["59.5,18.2", "59.3,18.0", "59.4,18.1"]


def test_default_limiter_is_process_wide_and_paced() -> None:
    enricher = GeocodingEnricher(_geocoder())

    assert enricher._limiter is geocoder_rate_limiter
    assert geocoder_rate_limiter.max_rate == 1
    assert geocoder_rate_limiter.time_period == GEOCODE_DELAY_SECONDS


@pytest.mark.asyncio
async def test_concurrent_runs_share_one_pace() -> None:
    period = 0.2
    limiter = AsyncLimiter(1, period)
    loop = asyncio.get_running_loop()
    lookup_times: list[float] = []

    async def reverse_address(lat, lon):
        lookup_times.append(loop.time())
        return None

    geocoder = MagicMock()
    geocoder.reverse_address = AsyncMock(side_effect=reverse_address)
    first = GeocodingEnricher(geocoder, limiter=limiter)
    second = GeocodingEnricher(geocoder, limiter=limiter)

    await asyncio.gather(
        first.enrich([_trip(0, POINTS[0], POINTS[1])]),
        second.enrich([_trip(1, POINTS[1], POINTS[2])]),
    )

    assert len(lookup_times) == 4
    gaps = [b - a for a, b in zip(lookup_times, lookup_times[1:])]
    # Timer granularity can wake a little early
    assert min(gaps) >= period * 0.9
