"""Pydantic models for GPS provider trip payloads."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.date_utils import from_epoch_seconds

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("begintime", "endtime")


class TripLocation(BaseModel):
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None


class InvalidTripRecord(ValueError):
    """A provider trip record that cannot be turned into a journal entry."""

    def __init__(self, reason: str, trip_id: str | None = None) -> None:
        self.reason = reason
        self.trip_id = trip_id
        super().__init__(reason)


class RawTripRecord(BaseModel):
    """One trip as reported by the provider's ``querytrips`` action.

    Coordinates and the trip id are optional in provider payloads; the time
    bounds are not. ``begin_location``/``end_location`` are filled in later by
    geocoding.
    """

    provider_trip_id: str | None = Field(default=None, alias="tripid")
    start_epoch_seconds: int = Field(alias="begintime")
    end_epoch_seconds: int = Field(alias="endtime")
    start_lat: float | None = Field(default=None, alias="slat")
    start_lon: float | None = Field(default=None, alias="slon")
    end_lat: float | None = Field(default=None, alias="elat")
    end_lon: float | None = Field(default=None, alias="elon")
    distance_km: float = Field(default=0.0, alias="mileage")
    begin_location: TripLocation | None = None
    end_location: TripLocation | None = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("provider_trip_id", mode="before")
    @classmethod
    def normalize_trip_id(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("distance_km", mode="before")
    @classmethod
    def default_distance(cls, v: Any) -> Any:
        return 0.0 if v is None or v == "" else v

    @field_validator(
        "start_lat",
        "start_lon",
        "end_lat",
        "end_lon",
        mode="before",
    )
    @classmethod
    def blank_coordinate(cls, v: Any) -> Any:
        return None if v == "" else v

    @property
    def start_time(self) -> datetime:
        return from_epoch_seconds(self.start_epoch_seconds)

    @property
    def end_time(self) -> datetime:
        return from_epoch_seconds(self.end_epoch_seconds)

    @property
    def duration_seconds(self) -> int:
        return self.end_epoch_seconds - self.start_epoch_seconds

    @property
    def start_coordinates(self) -> tuple[float, float] | None:
        if self.start_lat is None or self.start_lon is None:
            return None
        return self.start_lat, self.start_lon

    @property
    def end_coordinates(self) -> tuple[float, float] | None:
        if self.end_lat is None or self.end_lon is None:
            return None
        return self.end_lat, self.end_lon

    @classmethod
    def parse(cls, raw: Any) -> RawTripRecord:
        """Validate one provider record, raising InvalidTripRecord on rejection."""
        if not isinstance(raw, dict):
            msg = "Malformed trip record"
            raise InvalidTripRecord(msg)

        trip_id = raw.get("tripid")
        trip_id = str(trip_id) if trip_id not in (None, "") else None

        for field in REQUIRED_FIELDS:
            if raw.get(field) in (None, ""):
                raise InvalidTripRecord(f"Missing required field: {field}", trip_id)

        try:
            record = cls.model_validate(raw)
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            reason = f"Invalid field: {', '.join(fields)}" if fields else str(exc)
            raise InvalidTripRecord(reason, trip_id) from exc

        if record.end_epoch_seconds < record.start_epoch_seconds:
            msg = "Trip ends before it starts"
            raise InvalidTripRecord(msg, trip_id)
        return record


def parse_trip_batch(
    raw_trips: Any,
) -> tuple[list[RawTripRecord], list[dict[str, Any]]]:
    """Split a provider ``totaltrips`` list into valid records and skip details.

    Skip details use the same ``{tripId, reason}`` shape as reconciliation
    skips so both can be returned to the caller together.
    """
    if not raw_trips:
        return [], []

    trips: list[RawTripRecord] = []
    rejected: list[dict[str, Any]] = []
    for raw in raw_trips:
        try:
            trips.append(RawTripRecord.parse(raw))
        except InvalidTripRecord as exc:
            logger.warning(
                "Skipping provider trip %s: %s",
                exc.trip_id or "<no id>",
                exc.reason,
            )
            rejected.append({"tripId": exc.trip_id, "reason": exc.reason})
    return trips, rejected


__all__ = [
    "InvalidTripRecord",
    "RawTripRecord",
    "TripLocation",
    "parse_trip_batch",
]
