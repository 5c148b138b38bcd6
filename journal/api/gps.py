"""API routes for direct GPS provider access."""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from core.api import api_route
from core.auth import get_current_user, require_admin
from db.models import User
from gps.tracking_service import GpsTrackingService
from journal.models import GpsTrackingRequest
from journal.services.connection_service import ConnectionTestService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_tracking_service() -> GpsTrackingService:
    return GpsTrackingService()


def get_connection_service() -> ConnectionTestService:
    return ConnectionTestService()


@router.post("/gpsTracking", response_model=dict)
@api_route(logger)
async def gps_tracking(
    payload: GpsTrackingRequest,
    user: User = Depends(get_current_user),
    service: GpsTrackingService = Depends(get_tracking_service),
) -> dict[str, Any]:
    """Relay a tracking or report action to the provider."""
    return await service.dispatch(payload.action, payload.params)


@router.post("/testGPSConnection", response_model=dict)
@api_route(logger)
async def test_gps_connection(
    admin: User = Depends(require_admin),
    service: ConnectionTestService = Depends(get_connection_service),
) -> dict[str, Any]:
    """Log in to the provider and list a few devices."""
    return await service.test_connection()
