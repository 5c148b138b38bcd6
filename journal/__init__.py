"""
Driving journal sync package.

- api/: sync and GPS pass-through endpoints
- services/: trip sync, reconciliation, geocoding and device import
- models.py: request bodies
"""

from fastapi import APIRouter

from journal.api import gps, sync

router = APIRouter()

router.include_router(sync.router, tags=["gps-sync"])
router.include_router(gps.router, tags=["gps"])

__all__ = ["router"]
