from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeofenceSetting:
    """Allowed clock-in zone: center in degrees, radius in meters."""

    geofence_id: int
    center_lat: float
    center_lng: float
    radius_meters: float
    is_active: bool = True
    name: str = "Office"


@dataclass(frozen=True)
class GeofenceCheck:
    """Result of evaluating one point against the active zone."""

    inside: bool
    distance_meters: float | None = None
    radius_meters: float | None = None

    @property
    def enforced(self) -> bool:
        return self.radius_meters is not None
