from __future__ import annotations

from typing import Optional, Protocol

from .model import GeofenceSetting


class GeofenceSettingRepository(Protocol):
    """Read-only access to geofence configuration (managed elsewhere)."""

    def get_active(self) -> Optional[GeofenceSetting]:
        raise NotImplementedError
