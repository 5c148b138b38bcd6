"""Pydantic models for the sync API request bodies."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SyncTripsRequest(BaseModel):
    vehicleId: str
    startDate: datetime
    endDate: datetime

    model_config = ConfigDict(extra="ignore")


class SyncAllTripsRequest(BaseModel):
    startDate: datetime | None = None
    endDate: datetime | None = None
    # 0 means no limit
    maxVehicles: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="ignore")


class GpsTrackingRequest(BaseModel):
    action: str
    params: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")
