"""Journal sync services module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from journal.services.connection_service import ConnectionTestService
    from journal.services.device_sync_service import DeviceSyncService
    from journal.services.trip_sync_service import TripSyncService

__all__ = ("ConnectionTestService", "DeviceSyncService", "TripSyncService")


def __getattr__(name: str):
    if name == "ConnectionTestService":
        from journal.services.connection_service import ConnectionTestService

        return ConnectionTestService
    if name == "DeviceSyncService":
        from journal.services.device_sync_service import DeviceSyncService

        return DeviceSyncService
    if name == "TripSyncService":
        from journal.services.trip_sync_service import TripSyncService

        return TripSyncService
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
