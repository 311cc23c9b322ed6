from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from ..common.validators import require_latitude, require_longitude
from ..core.enums import PositionErrorCode
from ..core.exceptions import CapabilityUnavailable, PositionError, ValidationError


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def as_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


class PositionPlatform(Protocol):
    """Platform "get current position" capability.

    Returns ``{"coords": {"latitude": ..., "longitude": ...}}`` or raises
    :class:`PositionError` (permission denied, unavailable, timeout).
    """

    def get_current_position(self) -> Mapping[str, Any]:
        raise NotImplementedError


class ReportedPosition:
    """Position reported by the browser (navigator.geolocation) in the request body.

    Payload shapes accepted:
    - ``{"coords": {"latitude": 10.0, "longitude": 10.0}}``
    - ``{"error": {"code": 1, "message": "User denied Geolocation"}}``
    """

    def __init__(self, payload: Mapping[str, Any]):
        self._payload = payload

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> Optional["ReportedPosition"]:
        """None when the client has no geolocation capability to report from."""
        if not isinstance(payload, Mapping):
            return None
        if payload.get("geolocation_supported") is False:
            return None
        if "coords" not in payload and "error" not in payload:
            return None
        return cls(payload)

    def get_current_position(self) -> Mapping[str, Any]:
        error = self._payload.get("error")
        if error:
            if not isinstance(error, Mapping):
                raise PositionError(PositionErrorCode.POSITION_UNAVAILABLE, str(error))
            try:
                code = int(error.get("code", PositionErrorCode.POSITION_UNAVAILABLE))
            except (TypeError, ValueError):
                code = int(PositionErrorCode.POSITION_UNAVAILABLE)
            raise PositionError(code, str(error.get("message") or ""))
        return {"coords": self._payload.get("coords")}


class GeolocationProvider:
    """Single-shot location fetch, no retries.

    Platform errors propagate unchanged to the caller.
    """

    def __init__(self, platform: Optional[PositionPlatform]):
        self._platform = platform

    def get_current_location(self) -> Coordinates:
        if self._platform is None:
            raise CapabilityUnavailable("Geolocation is not supported on this device")

        position = self._platform.get_current_position()
        coords = position.get("coords") if isinstance(position, Mapping) else None
        if not isinstance(coords, Mapping):
            raise ValidationError("Position payload has no coordinates")

        return Coordinates(
            lat=require_latitude(coords.get("latitude")),
            lng=require_longitude(coords.get("longitude")),
        )
