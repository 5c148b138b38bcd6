"""Trip queries against the GPS provider, with backward window search."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from config import GPS_TOKEN_REJECTED_STATUSES, get_gps_config
from core.clients.gps51 import GpsProviderClient
from core.constants import BACKWARD_SEARCH_MAX_DAYS, BACKWARD_SEARCH_STEP_DAYS
from core.date_utils import ensure_utc, to_epoch_seconds
from core.exceptions import ProviderError
from gps.schemas import RawTripRecord, parse_trip_batch
from gps.token_cache import TokenProvider, get_token_cache

logger = logging.getLogger(__name__)


@dataclass
class TripBatch:
    trips: list[RawTripRecord] = field(default_factory=list)
    rejected: list[dict[str, Any]] = field(default_factory=list)
    windows_searched: int = 0
    window_start: datetime | None = None
    window_end: datetime | None = None

    @property
    def found_any(self) -> bool:
        return bool(self.trips or self.rejected)


def is_token_rejection(data: dict[str, Any]) -> bool:
    if data.get("status") in GPS_TOKEN_REJECTED_STATUSES:
        return True
    cause = str(data.get("cause") or "").lower()
    return "token" in cause


class GpsTripClient:
    """Fetches raw trips for one device.

    A provider answer that rejects the token triggers one re-login and one
    repeat of the same call.
    """

    def __init__(
        self,
        token_provider: TokenProvider | None = None,
        client: GpsProviderClient | None = None,
        *,
        timezone_offset: int | None = None,
    ) -> None:
        self._tokens = token_provider or get_token_cache()
        self._client = client or GpsProviderClient()
        if timezone_offset is None:
            timezone_offset = get_gps_config()["timezone_offset"]
        self._timezone_offset = timezone_offset

    async def call(
        self,
        action: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Call an authenticated provider action and return the raw body.

        Non-zero statuses other than a token rejection are returned as-is so
        pass-through callers can relay them.
        """
        token = await self._tokens.get()
        data = await self._client.call(action, payload, token=token)
        if data.get("status") != 0 and is_token_rejection(data):
            logger.warning(
                "GPS provider rejected token on %s (status %s); logging in again",
                action,
                data.get("status"),
            )
            self._tokens.invalidate()
            token = await self._tokens.get()
            data = await self._client.call(action, payload, token=token)
        return data

    async def query_trips(
        self,
        device_id: str,
        window_start: datetime,
        window_end: datetime,
    ) -> dict[str, Any]:
        payload = {
            "deviceid": device_id,
            "begintime": to_epoch_seconds(window_start),
            "endtime": to_epoch_seconds(window_end),
            "timezone": self._timezone_offset,
        }
        data = await self.call("querytrips", payload)
        if data.get("status") != 0:
            cause = data.get("cause") or "Unknown error"
            msg = f"GPS provider error: {cause}"
            raise ProviderError(
                msg,
                {"deviceId": device_id, "providerStatus": data.get("status")},
            )
        return data

    async def fetch_trips(
        self,
        device_id: str,
        window_start: datetime,
        window_end: datetime,
        *,
        backward_search: bool = False,
    ) -> TripBatch:
        """Fetch trips for ``device_id`` between the given bounds.

        With ``backward_search`` an empty window is shifted back a week at a
        time until something is found or the shift would pass the lookback
        limit. Errors stop the search immediately.
        """
        start = ensure_utc(window_start)
        end = ensure_utc(window_end)
        step = timedelta(days=BACKWARD_SEARCH_STEP_DAYS)
        max_shift = timedelta(days=BACKWARD_SEARCH_MAX_DAYS)
        shift = timedelta(0)
        batch = TripBatch()

        while True:
            data = await self.query_trips(device_id, start - shift, end - shift)
            trips, rejected = parse_trip_batch(data.get("totaltrips"))
            batch = TripBatch(
                trips=trips,
                rejected=rejected,
                windows_searched=batch.windows_searched + 1,
                window_start=start - shift,
                window_end=end - shift,
            )
            if batch.found_any or not backward_search:
                break
            if shift + step > max_shift:
                logger.info(
                    "No trips for device %s within %d days before %s",
                    device_id,
                    BACKWARD_SEARCH_MAX_DAYS,
                    end.isoformat(),
                )
                break
            shift += step
            logger.debug(
                "No trips for device %s; searching %d days back",
                device_id,
                shift.days,
            )

        logger.info(
            "Fetched %d trips (%d rejected) for device %s after %d window(s)",
            len(batch.trips),
            len(batch.rejected),
            device_id,
            batch.windows_searched,
        )
        return batch


__all__ = ["GpsTripClient", "TripBatch", "is_token_rejection"]
