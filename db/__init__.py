"""Database package for MongoDB operations using Beanie ODM.

Modules:
    manager: DatabaseManager singleton for connection handling
    models: Beanie Document models for all collections
    store: EntityStore, the narrow CRUD interface used by the sync services
    serializers: Document to JSON helpers

Usage:
    from db import EntityStore, Vehicle

    vehicles = EntityStore(Vehicle)
    tracked = [v for v in await vehicles.list() if v.gps_device_id]
"""

from db.manager import DatabaseManager, db_manager
from db.models import (
    ALL_DOCUMENT_MODELS,
    DrivingJournalEntry,
    JournalLocation,
    JournalStatus,
    TripType,
    User,
    UserRole,
    Vehicle,
)
from db.serializers import serialize_datetime, serialize_document, serialize_documents
from db.store import EntityStore

__all__ = [
    "ALL_DOCUMENT_MODELS",
    "DatabaseManager",
    "DrivingJournalEntry",
    "EntityStore",
    "JournalLocation",
    "JournalStatus",
    "TripType",
    "User",
    "UserRole",
    "Vehicle",
    "db_manager",
    "serialize_datetime",
    "serialize_document",
    "serialize_documents",
]
