"""Beanie ODM document models for MongoDB collections.

Usage:
    from db.models import DrivingJournalEntry, Vehicle

    # Entries of one vehicle
    entries = await DrivingJournalEntry.find(
        DrivingJournalEntry.vehicle_id == vehicle_id,
    ).to_list()

    # Insert a new document
    vehicle = Vehicle(registration_number="AB12345", gps_device_id="123")
    await vehicle.insert()
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from beanie import Document, Indexed
from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from core.date_utils import get_current_utc_time, parse_timestamp


class TripType(StrEnum):
    UNCLASSIFIED = "unclassified"
    BUSINESS = "business"
    PRIVATE = "private"


class JournalStatus(StrEnum):
    PENDING_REVIEW = "pending_review"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REQUIRES_INFO = "requires_info"


class UserRole(StrEnum):
    ADMIN = "admin"
    USER = "user"


class JournalLocation(BaseModel):
    """A trip endpoint; ``address`` is None until geocoded."""

    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None


class Vehicle(Document):
    """Vehicle document; only vehicles with a GPS device id take part in sync."""

    registration_number: str
    gps_device_id: str | None = None
    assigned_driver: str | None = None
    make: str | None = None
    model: str | None = None
    category: str | None = None
    vehicle_type: str | None = None
    fuel_type: str | None = None
    is_pool_vehicle: bool = False
    status: str = "active"
    notes: str | None = None
    created_at: datetime = Field(default_factory=get_current_utc_time)

    @field_validator("gps_device_id", mode="before")
    @classmethod
    def normalize_device_id(cls, v: Any) -> str | None:
        # Provider device ids are numeric in some payloads
        if v is None or v == "":
            return None
        return str(v)

    class Settings:
        name = "vehicles"
        indexes = [
            IndexModel(
                [("registration_number", ASCENDING)],
                name="vehicles_registration_idx",
            ),
            IndexModel(
                [("gps_device_id", ASCENDING)],
                name="vehicles_gps_device_idx",
                sparse=True,
            ),
        ]

    class Config:
        extra = "allow"


class User(Document):
    """Application user; ``api_token`` is the bearer credential for the API."""

    email: Indexed(str, unique=True)
    full_name: str | None = None
    role: UserRole = UserRole.USER
    api_token: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    class Settings:
        name = "users"
        indexes = [
            IndexModel(
                [("api_token", ASCENDING)],
                name="users_api_token_idx",
                sparse=True,
            ),
        ]


class DrivingJournalEntry(Document):
    """One trip in the driving journal."""

    vehicle_id: str
    registration_number: str | None = None
    gps_trip_id: str | None = None
    start_time: datetime
    end_time: datetime
    distance_km: float = 0.0
    duration_minutes: int = 0
    trip_type: TripType = TripType.UNCLASSIFIED
    status: JournalStatus = JournalStatus.PENDING_REVIEW
    start_location: JournalLocation | None = None
    end_location: JournalLocation | None = None
    driver_email: str | None = None
    driver_name: str | None = None
    is_anomaly: bool = False
    anomaly_reason: str | None = None
    created_at: datetime = Field(default_factory=get_current_utc_time)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_datetime_fields(cls, v: Any) -> datetime | None:
        if v is None:
            return None
        return parse_timestamp(v)

    class Settings:
        name = "driving_journal_entries"
        indexes = [
            IndexModel(
                [("vehicle_id", ASCENDING), ("start_time", DESCENDING)],
                name="journal_vehicle_start_idx",
            ),
            IndexModel(
                [("gps_trip_id", ASCENDING)],
                name="journal_gps_trip_idx",
                sparse=True,
            ),
        ]

    class Config:
        extra = "allow"


ALL_DOCUMENT_MODELS = [
    Vehicle,
    User,
    DrivingJournalEntry,
]
