"""Import provider devices as vehicles."""

from __future__ import annotations

import logging
from typing import Any

from core.exceptions import ProviderError
from db.models import Vehicle
from db.store import EntityStore
from gps.tracking_service import GpsTrackingService

logger = logging.getLogger(__name__)


def flatten_devices(device_list: dict[str, Any]) -> list[dict[str, Any]]:
    """Devices from every group of a ``querymonitorlist`` answer."""
    devices: list[dict[str, Any]] = []
    for group in device_list.get("groups") or []:
        group_devices = group.get("devices") if isinstance(group, dict) else None
        if isinstance(group_devices, list):
            devices.extend(d for d in group_devices if isinstance(d, dict))
    return devices


def vehicle_from_device(device: dict[str, Any]) -> dict[str, Any]:
    device_id = str(device.get("deviceid"))
    return {
        "registration_number": device.get("devicename") or device_id,
        "gps_device_id": device_id,
        "make": "Unknown",
        "model": "GPS unit",
        "category": "car",
        "vehicle_type": "car",
        "fuel_type": "petrol",
        "is_pool_vehicle": False,
        "status": "active",
        "notes": (
            "Imported automatically from the GPS system. "
            f"Device type: {device.get('devicetype')}"
        ),
    }


class DeviceSyncService:
    def __init__(
        self,
        *,
        tracking: GpsTrackingService | None = None,
        vehicles: EntityStore[Vehicle] | None = None,
    ) -> None:
        self._tracking = tracking or GpsTrackingService()
        self._vehicles = vehicles or EntityStore(Vehicle)

    async def sync_devices(self) -> dict[str, Any]:
        data = await self._tracking.get_device_list({})
        if data.get("status") != 0:
            msg = f"Failed to fetch GPS devices: {data.get('cause') or 'Unknown error'}"
            raise ProviderError(msg, {"providerStatus": data.get("status")})

        devices = flatten_devices(data)
        known_ids = {
            v.gps_device_id for v in await self._vehicles.list() if v.gps_device_id
        }

        created: list[dict[str, Any]] = []
        skipped: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []

        for device in devices:
            device_id = str(device.get("deviceid"))
            if device_id in known_ids:
                skipped.append(
                    {
                        "deviceId": device_id,
                        "deviceName": device.get("devicename"),
                        "reason": "Already exists",
                    },
                )
                continue

            record = vehicle_from_device(device)
            try:
                vehicle = await self._vehicles.create(record)
            except Exception as exc:
                logger.exception("Failed to import GPS device %s", device_id)
                errors.append(
                    {
                        "deviceId": device_id,
                        "deviceName": device.get("devicename"),
                        "error": str(exc),
                    },
                )
                continue

            known_ids.add(device_id)
            created.append(
                {
                    "vehicleId": str(vehicle.id),
                    "deviceId": device_id,
                    "registrationNumber": record["registration_number"],
                },
            )

        logger.info(
            "GPS device import: %d devices, %d created, %d skipped, %d errors",
            len(devices),
            len(created),
            len(skipped),
            len(errors),
        )
        return {
            "success": True,
            "summary": {
                "total": len(devices),
                "created": len(created),
                "skipped": len(skipped),
                "errors": len(errors),
            },
            "created": created,
            "skipped": skipped,
            "errors": errors,
        }


__all__ = ["DeviceSyncService", "flatten_devices", "vehicle_from_device"]
