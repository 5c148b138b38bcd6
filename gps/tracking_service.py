"""Pass-through access to the provider's tracking and reporting actions."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from config import get_gps_config
from core.exceptions import ValidationError
from gps.trip_client import GpsTripClient

logger = logging.getLogger(__name__)


class GpsTrackingService:
    """Maps API action names to provider actions and relays the answer."""

    def __init__(self, trip_client: GpsTripClient | None = None) -> None:
        self._client = trip_client or GpsTripClient()
        self._handlers: dict[
            str, Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]
        ] = {
            "getDeviceList": self.get_device_list,
            "getLastPosition": self.get_last_position,
            "getTrackHistory": self.get_track_history,
            "getTrips": self.get_trips,
            "getMileageReport": self.get_mileage_report,
            "getFuelReport": self.get_fuel_report,
        }

    @property
    def actions(self) -> list[str]:
        return list(self._handlers)

    async def dispatch(
        self,
        action: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        handler = self._handlers.get(action)
        if handler is None:
            msg = "Unknown action"
            raise ValidationError(msg, {"action": action})
        logger.debug("GPS tracking action %s", action)
        return await handler(params or {})

    async def get_device_list(self, params: dict[str, Any]) -> dict[str, Any]:
        # Always the service account; callers cannot list other accounts
        username = get_gps_config()["username"]
        return await self._client.call("querymonitorlist", {"username": username})

    async def get_last_position(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._client.call(
            "lastposition",
            {
                "deviceids": params.get("deviceIds") or [],
                "lastquerypositiontime": 0,
            },
        )

    async def get_track_history(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._client.call(
            "querytracks",
            {
                "deviceid": params.get("deviceId"),
                "begintime": params.get("startTime"),
                "endtime": params.get("endTime"),
                "timezone": get_gps_config()["timezone_offset"],
            },
        )

    async def get_trips(self, params: dict[str, Any]) -> dict[str, Any]:
        result = await self._client.call(
            "querytrips",
            {
                "deviceid": params.get("deviceId"),
                "begintime": params.get("begintime"),
                "endtime": params.get("endtime"),
                "timezone": get_gps_config()["timezone_offset"],
            },
        )
        # Addresses are left for the client to resolve on demand
        for trip in result.get("totaltrips") or []:
            if not isinstance(trip, dict):
                continue
            if trip.get("slat") is not None and trip.get("slon") is not None:
                trip["beginlocation"] = {
                    "latitude": trip["slat"],
                    "longitude": trip["slon"],
                    "address": None,
                }
            if trip.get("elat") is not None and trip.get("elon") is not None:
                trip["endlocation"] = {
                    "latitude": trip["elat"],
                    "longitude": trip["elon"],
                    "address": None,
                }
        return result

    async def get_mileage_report(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._client.call(
            "reportmileagedetail",
            {
                "deviceid": params.get("deviceId"),
                "startday": params.get("startDay"),
                "endday": params.get("endDay"),
                "offset": 1,
            },
        )

    async def get_fuel_report(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._client.call(
            "reportoildaily",
            {
                "devices": params.get("deviceIds") or [],
                "startday": params.get("startDay"),
                "endday": params.get("endDay"),
                "offset": 1,
            },
        )


__all__ = ["GpsTrackingService"]
