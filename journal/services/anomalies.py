"""Anomaly rules for newly synced journal entries."""

from __future__ import annotations

from core.constants import LONG_TRIP_KM, LONG_TRIP_MINUTES

DRIVER_UNKNOWN = "Driver could not be identified automatically"
LONG_DISTANCE = f"Unusually long trip (over {LONG_TRIP_KM:g} km)"
LONG_DURATION = f"Unusually long duration (over {LONG_TRIP_MINUTES // 60} hours)"

REASON_SEPARATOR = ". "


def detect_anomalies(
    *,
    distance_km: float,
    duration_minutes: int,
    driver_resolved: bool,
) -> list[str]:
    """Return the reasons an entry needs review, in a fixed order."""
    reasons: list[str] = []
    if not driver_resolved:
        reasons.append(DRIVER_UNKNOWN)
    if distance_km > LONG_TRIP_KM:
        reasons.append(LONG_DISTANCE)
    if duration_minutes > LONG_TRIP_MINUTES:
        reasons.append(LONG_DURATION)
    return reasons


def join_reasons(reasons: list[str]) -> str | None:
    return REASON_SEPARATOR.join(reasons) if reasons else None
