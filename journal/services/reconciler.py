"""
Reconciliation of provider trips against stored journal entries.

Each provider trip ends up in one of three places: a new entry, a backfill
of the provider trip id on an entry that already covers it, or a skip.
Existing entries are otherwise never modified.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from core.constants import TRIP_MATCH_WINDOW_MS
from core.date_utils import ensure_utc, to_epoch_ms
from core.exceptions import PersistenceError
from db.models import DrivingJournalEntry, JournalStatus, TripType, User, Vehicle
from journal.services.anomalies import detect_anomalies, join_reasons

if TYPE_CHECKING:
    from db.store import EntityStore
    from gps.schemas import RawTripRecord, TripLocation

logger = logging.getLogger(__name__)

SKIP_ALREADY_EXISTS = "Already exists"
SKIP_BACKFILLED = "Matched existing entry; provider trip id backfilled"


@dataclass
class ReconcileResult:
    created: list[DrivingJournalEntry] = field(default_factory=list)
    skipped: list[dict[str, Any]] = field(default_factory=list)
    backfilled: int = 0

    @property
    def synced(self) -> int:
        return len(self.created)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def resolve_driver(vehicle: Vehicle, users: list[User]) -> User | None:
    """Find the user whose email matches the vehicle's assigned driver."""
    email = (vehicle.assigned_driver or "").strip().lower()
    if not email:
        return None
    for user in users:
        if (user.email or "").strip().lower() == email:
            return user
    logger.info(
        "Assigned driver %s of vehicle %s is not a known user",
        vehicle.assigned_driver,
        vehicle.registration_number,
    )
    return None


def duration_minutes(seconds: int) -> int:
    # Half up, so a 90 second trip is 2 minutes
    return math.floor(seconds / 60 + 0.5)


def _location(
    enriched: TripLocation | None,
    coordinates: tuple[float, float] | None,
) -> dict[str, Any] | None:
    if enriched is not None:
        return enriched.model_dump()
    if coordinates is None:
        return None
    return {"latitude": coordinates[0], "longitude": coordinates[1], "address": None}


def find_match(
    trip: RawTripRecord,
    entries: list[DrivingJournalEntry],
) -> DrivingJournalEntry | None:
    if trip.provider_trip_id:
        for entry in entries:
            if entry.gps_trip_id == trip.provider_trip_id:
                return entry

    trip_start_ms = trip.start_epoch_seconds * 1000
    for entry in entries:
        if entry.start_time is None:
            continue
        entry_start_ms = to_epoch_ms(ensure_utc(entry.start_time))
        if abs(entry_start_ms - trip_start_ms) < TRIP_MATCH_WINDOW_MS:
            return entry
    return None


class TripReconciler:
    def __init__(self, journal_store: EntityStore[DrivingJournalEntry]) -> None:
        self._journal = journal_store

    def build_entry(
        self,
        vehicle: Vehicle,
        trip: RawTripRecord,
        driver: User | None,
    ) -> dict[str, Any]:
        distance = round(trip.distance_km, 2)
        minutes = duration_minutes(trip.duration_seconds)
        reasons = detect_anomalies(
            distance_km=distance,
            duration_minutes=minutes,
            driver_resolved=driver is not None,
        )
        return {
            "vehicle_id": str(vehicle.id),
            "registration_number": vehicle.registration_number,
            "gps_trip_id": trip.provider_trip_id,
            "start_time": trip.start_time,
            "end_time": trip.end_time,
            "distance_km": distance,
            "duration_minutes": minutes,
            "trip_type": TripType.UNCLASSIFIED,
            "status": JournalStatus.PENDING_REVIEW,
            "start_location": _location(trip.begin_location, trip.start_coordinates),
            "end_location": _location(trip.end_location, trip.end_coordinates),
            "driver_email": driver.email if driver else None,
            "driver_name": driver.full_name if driver else None,
            "is_anomaly": bool(reasons),
            "anomaly_reason": join_reasons(reasons),
        }

    async def reconcile(
        self,
        vehicle: Vehicle,
        trips: list[RawTripRecord],
        existing: list[DrivingJournalEntry],
        driver: User | None,
    ) -> ReconcileResult:
        """Create, backfill or skip each trip in provider order.

        ``existing`` is a snapshot of the vehicle's entries; entries created
        here are added to it so a repeated trip in the same batch is skipped.
        """
        snapshot = list(existing)
        result = ReconcileResult()

        for trip in trips:
            match = find_match(trip, snapshot)
            try:
                if match is None:
                    entry = await self._journal.create(
                        self.build_entry(vehicle, trip, driver),
                    )
                    snapshot.append(entry)
                    result.created.append(entry)
                    if entry.is_anomaly:
                        logger.info(
                            "Flagged trip %s of %s: %s",
                            trip.provider_trip_id,
                            vehicle.registration_number,
                            entry.anomaly_reason,
                        )
                    continue

                if not match.gps_trip_id and trip.provider_trip_id:
                    await self._journal.update(
                        match.id,
                        {"gps_trip_id": trip.provider_trip_id},
                    )
                    match.gps_trip_id = trip.provider_trip_id
                    result.backfilled += 1
                    reason = SKIP_BACKFILLED
                else:
                    reason = SKIP_ALREADY_EXISTS
            except Exception as exc:
                logger.exception(
                    "Failed to store trip %s for vehicle %s",
                    trip.provider_trip_id,
                    vehicle.registration_number,
                )
                msg = f"Failed to store trip: {exc}"
                raise PersistenceError(
                    msg,
                    {"synced": result.synced, "skipped": result.skipped_count},
                ) from exc

            result.skipped.append({"tripId": trip.provider_trip_id, "reason": reason})

        logger.info(
            "Reconciled %d trips for %s: %d created, %d skipped, %d backfilled",
            len(trips),
            vehicle.registration_number,
            result.synced,
            result.skipped_count,
            result.backfilled,
        )
        return result


__all__ = [
    "ReconcileResult",
    "TripReconciler",
    "duration_minutes",
    "find_match",
    "resolve_driver",
]
