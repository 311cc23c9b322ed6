from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_error"


class Unauthenticated(DomainError):
    """Raised when an action needs an active session and there is none."""

    kind = "unauthenticated"


class LocationError(DomainError):
    """Raised when the device location could not be acquired."""

    kind = "location_error"


class CapabilityUnavailable(LocationError):
    """The platform has no geolocation capability at all."""

    kind = "capability_unavailable"


class PositionError(LocationError):
    """The platform geolocation call failed (denied, unavailable, timeout)."""

    def __init__(self, code: int, message: str = ""):
        super().__init__(message or f"Position error {code}")
        self.code = int(code)
        self.message = message


class GeofenceViolation(DomainError):
    """Raised when a location lies outside the active geofence."""

    kind = "geofence_violation"

    def __init__(
        self,
        message: str,
        *,
        distance_meters: Optional[float] = None,
        radius_meters: Optional[float] = None,
        location: Any = None,
    ):
        super().__init__(message)
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters
        self.location = location


class StorageFailure(DomainError):
    """Raised when a read or write against the attendance store fails."""

    kind = "storage_failure"


class ToggleInProgress(DomainError):
    """Raised when a clock toggle is already running for the same user."""

    kind = "toggle_in_progress"
