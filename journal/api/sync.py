"""API routes for GPS trip and device sync actions."""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from core.api import api_route
from core.auth import require_admin
from db.models import User
from journal.models import SyncAllTripsRequest, SyncTripsRequest
from journal.services.device_sync_service import DeviceSyncService
from journal.services.trip_sync_service import TripSyncService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_trip_sync_service() -> TripSyncService:
    return TripSyncService()


def get_device_sync_service() -> DeviceSyncService:
    return DeviceSyncService()


@router.post("/syncGPSTrips", response_model=dict)
@api_route(logger)
async def sync_gps_trips(
    payload: SyncTripsRequest,
    admin: User = Depends(require_admin),
    service: TripSyncService = Depends(get_trip_sync_service),
) -> dict[str, Any]:
    """Sync provider trips for one vehicle into the journal."""
    logger.info(
        "GPS trip sync for vehicle %s requested by %s",
        payload.vehicleId,
        admin.email,
    )
    return await service.sync_vehicle(
        payload.vehicleId,
        payload.startDate,
        payload.endDate,
    )


@router.post("/syncAllGPSTrips", response_model=dict)
@api_route(logger)
async def sync_all_gps_trips(
    payload: SyncAllTripsRequest | None = None,
    admin: User = Depends(require_admin),
    service: TripSyncService = Depends(get_trip_sync_service),
) -> dict[str, Any]:
    """Sync provider trips for every vehicle with a GPS device."""
    if payload is None:
        payload = SyncAllTripsRequest()
    logger.info("Bulk GPS trip sync requested by %s", admin.email)
    return await service.sync_all(
        payload.startDate,
        payload.endDate,
        payload.maxVehicles,
    )


@router.post("/syncGPSDevices", response_model=dict)
@api_route(logger)
async def sync_gps_devices(
    admin: User = Depends(require_admin),
    service: DeviceSyncService = Depends(get_device_sync_service),
) -> dict[str, Any]:
    """Create vehicles for provider devices that are not imported yet."""
    logger.info("GPS device import requested by %s", admin.email)
    return await service.sync_devices()
