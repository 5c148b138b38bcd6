"""Serialization utilities for MongoDB documents.

Provides functions for converting Beanie documents to JSON-serializable
dicts for API responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from beanie import Document

from core.date_utils import parse_timestamp


def serialize_datetime(dt: datetime | str | None) -> str | None:
    """Serialize a datetime to ISO format string.

    Converts +00:00 timezone suffix to Z for consistency.
    """
    if dt is None:
        return None
    dt = parse_timestamp(dt)
    if dt is None:
        return None
    return dt.isoformat().replace("+00:00", "Z")


def serialize_document(doc: Document | None) -> dict[str, Any]:
    """Serialize a Beanie document for a JSON response.

    ``_id`` is exposed as a string ``id`` and datetimes as ISO strings with
    a ``Z`` suffix.
    """
    if doc is None:
        return {}
    data = doc.model_dump(mode="python", exclude={"revision_id"})
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key == "id":
            result["id"] = str(value) if value is not None else None
        elif isinstance(value, datetime):
            result[key] = serialize_datetime(value)
        else:
            result[key] = value
    return result


def serialize_documents(docs: list[Document]) -> list[dict[str, Any]]:
    return [serialize_document(doc) for doc in docs]
