"""Service layer for GPS trip sync: one vehicle, or every tracked vehicle."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, time, timedelta
from typing import Any

from config import GEOCODE_TRIPS_ON_SYNC
from core.constants import BULK_SYNC_LOOKBACK_DAYS
from core.date_utils import ensure_utc, get_current_utc_time
from core.exceptions import (
    AuthenticationError,
    JournalSyncError,
    MalformedResponseError,
    ResourceNotFoundError,
    ValidationError,
)
from db.models import DrivingJournalEntry, User, Vehicle
from db.serializers import serialize_documents
from db.store import EntityStore
from gps.token_cache import TokenProvider, get_token_cache
from gps.trip_client import GpsTripClient
from journal.services.geocoding import GeocodingEnricher
from journal.services.reconciler import (
    ReconcileResult,
    TripReconciler,
    resolve_driver,
)

logger = logging.getLogger(__name__)


def default_bulk_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Start of the day 90 days ago through the end of today, in UTC."""
    today = (now or get_current_utc_time()).astimezone(UTC).date()
    start = datetime.combine(
        today - timedelta(days=BULK_SYNC_LOOKBACK_DAYS),
        time.min,
        tzinfo=UTC,
    )
    end = datetime.combine(today, time(23, 59, 59), tzinfo=UTC)
    return start, end


class TripSyncService:
    def __init__(
        self,
        *,
        vehicles: EntityStore[Vehicle] | None = None,
        journal: EntityStore[DrivingJournalEntry] | None = None,
        users: EntityStore[User] | None = None,
        token_provider: TokenProvider | None = None,
        trip_client: GpsTripClient | None = None,
        enricher: GeocodingEnricher | None = None,
        geocode: bool = GEOCODE_TRIPS_ON_SYNC,
    ) -> None:
        self._vehicles = vehicles or EntityStore(Vehicle)
        self._journal = journal or EntityStore(DrivingJournalEntry)
        self._users = users or EntityStore(User)
        self._tokens = token_provider or get_token_cache()
        self._trip_client = trip_client or GpsTripClient(self._tokens)
        self._enricher = enricher or GeocodingEnricher()
        self._reconciler = TripReconciler(self._journal)
        self._geocode = geocode

    async def _process_vehicle(
        self,
        vehicle: Vehicle,
        trips: list,
        users: list[User],
    ) -> ReconcileResult:
        if not trips:
            return ReconcileResult()
        if self._geocode:
            await self._enricher.enrich(trips)
        existing = await self._journal.filter(vehicle_id=str(vehicle.id))
        driver = resolve_driver(vehicle, users)
        return await self._reconciler.reconcile(vehicle, trips, existing, driver)

    async def sync_vehicle(
        self,
        vehicle_id: str,
        start_date: datetime,
        end_date: datetime,
    ) -> dict[str, Any]:
        """Sync one vehicle, searching backward when the window is empty."""
        vehicle = await self._vehicles.get(vehicle_id)
        if vehicle is None:
            msg = "Vehicle not found"
            raise ResourceNotFoundError(msg, {"vehicleId": vehicle_id})
        if not vehicle.gps_device_id:
            msg = "No GPS device ID configured for this vehicle"
            raise ValidationError(msg, {"vehicleId": vehicle_id})

        start = ensure_utc(start_date)
        end = ensure_utc(end_date)
        if end < start:
            msg = "endDate must not be before startDate"
            raise ValidationError(msg)

        logger.info(
            "Syncing GPS trips for %s (device %s) from %s to %s",
            vehicle.registration_number,
            vehicle.gps_device_id,
            start.isoformat(),
            end.isoformat(),
        )
        batch = await self._trip_client.fetch_trips(
            vehicle.gps_device_id,
            start,
            end,
            backward_search=True,
        )
        users = await self._users.list()
        result = await self._process_vehicle(vehicle, batch.trips, users)

        skipped_details = batch.rejected + result.skipped
        return {
            "success": True,
            "synced": result.synced,
            "skipped": len(skipped_details),
            "trips": serialize_documents(result.created),
            "skippedDetails": skipped_details,
            "windowsSearched": batch.windows_searched,
        }

    async def sync_all(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        max_vehicles: int | None = None,
    ) -> dict[str, Any]:
        """Sync every vehicle with a GPS device over one fixed window.

        Per-vehicle failures are reported in ``results`` and do not stop the
        run. A rejected provider login does.
        """
        default_start, default_end = default_bulk_window()
        start = ensure_utc(start_date) if start_date else default_start
        end = ensure_utc(end_date) if end_date else default_end

        vehicles = [v for v in await self._vehicles.list() if v.gps_device_id]
        if max_vehicles:
            vehicles = vehicles[:max_vehicles]

        results: list[dict[str, Any]] = []
        if not vehicles:
            logger.info("No vehicles with a GPS device to sync")
            return {
                "success": True,
                "totalVehicles": 0,
                "totalSynced": 0,
                "totalSkipped": 0,
                "results": results,
            }

        # Fail the whole run up front if the provider login is rejected
        await self._tokens.get()
        users = await self._users.list()

        logger.info(
            "Syncing GPS trips for %d vehicles from %s to %s",
            len(vehicles),
            start.isoformat(),
            end.isoformat(),
        )
        for vehicle in vehicles:
            label = vehicle.registration_number
            try:
                batch = await self._trip_client.fetch_trips(
                    vehicle.gps_device_id,
                    start,
                    end,
                )
                result = await self._process_vehicle(vehicle, batch.trips, users)
            except AuthenticationError:
                raise
            except MalformedResponseError as exc:
                logger.warning(
                    "Unreadable trip response for %s, treating as no trips: %s",
                    label,
                    exc.message,
                )
                results.append({"vehicle": label, "synced": 0, "skipped": 0})
                continue
            except JournalSyncError as exc:
                logger.error("Trip sync failed for %s: %s", label, exc.message)
                results.append({"vehicle": label, "error": exc.message})
                continue
            except Exception as exc:
                logger.exception("Unexpected error syncing trips for %s", label)
                results.append({"vehicle": label, "error": str(exc)})
                continue

            results.append(
                {
                    "vehicle": label,
                    "synced": result.synced,
                    "skipped": len(batch.rejected) + result.skipped_count,
                },
            )

        total_synced = sum(r.get("synced", 0) for r in results)
        total_skipped = sum(r.get("skipped", 0) for r in results)
        logger.info(
            "Bulk GPS sync finished: %d synced, %d skipped across %d vehicles",
            total_synced,
            total_skipped,
            len(vehicles),
        )
        return {
            "success": True,
            "totalVehicles": len(vehicles),
            "totalSynced": total_synced,
            "totalSkipped": total_skipped,
            "results": results,
        }


__all__ = ["TripSyncService", "default_bulk_window"]
