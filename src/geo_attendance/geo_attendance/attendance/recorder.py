"""Clock toggle state machine.

States are ``CLOCK_OUT`` and ``CLOCK_IN``; the only transition is the toggle.
One attempt runs strictly in order: session -> location -> geofence ->
persist -> update displayed status. Any abort leaves both the event log and
the displayed status untouched.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..auth.session_guard import AuthSession, SessionGuard
from ..core.enums import ClockStatus, PositionErrorCode
from ..core.exceptions import (
    CapabilityUnavailable,
    DomainError,
    GeofenceViolation,
    LocationError,
    PositionError,
    StorageFailure,
    ToggleInProgress,
    Unauthenticated,
    ValidationError,
)
from ..geofence.evaluator import GeofenceEvaluator
from ..geolocation.provider import Coordinates, GeolocationProvider
from .model import AttendanceEvent
from .repository import AttendanceEventRepository
from .resolver import AttendanceStateResolver

logger = logging.getLogger(__name__)

_POSITION_MESSAGES = {
    PositionErrorCode.PERMISSION_DENIED: "Location permission was denied",
    PositionErrorCode.POSITION_UNAVAILABLE: "Your location is currently unavailable",
    PositionErrorCode.TIMEOUT: "Timed out while getting your location",
}


@dataclass(frozen=True)
class ToggleOutcome:
    """User-facing result of one toggle attempt."""

    success: bool
    status: Optional[ClockStatus]
    message: str
    error: Optional[str] = None
    event: Optional[AttendanceEvent] = None
    location: Optional[Coordinates] = None
    distance_meters: Optional[float] = None

    @property
    def login_required(self) -> bool:
        return self.error == Unauthenticated.kind


class AttendanceRecorder:
    """Owns the displayed clock status of one user.

    The displayed status follows the persisted log: every attempt re-reads the
    latest event before toggling, and a changed status is only shown after a
    confirmed write. Attempts are non-reentrant: a toggle started while another
    is in flight is rejected. Status reads never block a toggle.
    """

    def __init__(
        self,
        user_id: int,
        *,
        session_guard: SessionGuard,
        resolver: AttendanceStateResolver,
        evaluator: GeofenceEvaluator,
        events: AttendanceEventRepository,
    ):
        self._user_id = int(user_id)
        self._guard = session_guard
        self._resolver = resolver
        self._evaluator = evaluator
        self._events = events
        self._lock = threading.Lock()
        # Guards _status and _generation; never held across I/O.
        self._state_lock = threading.Lock()
        self._status: Optional[ClockStatus] = None
        self._generation = 0

    @property
    def user_id(self) -> int:
        return self._user_id

    @property
    def status(self) -> Optional[ClockStatus]:
        return self._status

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def load(self) -> ClockStatus:
        """(Re)establish the displayed status from the persisted log.

        A result read before a toggle committed is discarded in favour of the
        toggle's status.
        """
        with self._state_lock:
            generation = self._generation
        status = self._resolver.resolve_current_status(self._user_id)
        with self._state_lock:
            if generation == self._generation:
                self._set_status_locked(status)
            return self._status

    def toggle(self, geolocation: GeolocationProvider, *, device_info: Optional[Dict[str, Any]] = None) -> ToggleOutcome:
        if not self._lock.acquire(blocking=False):
            logger.warning("Rejected concurrent toggle for user %s", self._user_id)
            return self._failure(ToggleInProgress("A clock action is already in progress"))

        try:
            return self._attempt(geolocation, dict(device_info or {}))
        except DomainError as e:
            return self._failure(e)
        except Exception as e:
            error = DomainError("Something went wrong, please try again")
            error.__cause__ = e
            return self._failure(error)
        finally:
            self._lock.release()

    def _attempt(self, geolocation: GeolocationProvider, device_info: Dict[str, Any]) -> ToggleOutcome:
        auth = self._require_session()
        if auth.user_id != self._user_id:
            raise Unauthenticated("Session does not belong to this user")

        # Another process may have written since the last read.
        self._set_status(self._resolver.resolve_current_status(self._user_id))

        location = self._acquire_location(geolocation)

        check = self._evaluator.evaluate(location.lat, location.lng)
        if not check.inside:
            raise GeofenceViolation(
                "You are outside the allowed area",
                distance_meters=check.distance_meters,
                radius_meters=check.radius_meters,
                location=location,
            )

        new_status = self._status.toggled()
        try:
            event = self._events.insert_event(
                user_id=self._user_id,
                status=new_status,
                location_lat=location.lat,
                location_lng=location.lng,
                device_info=device_info,
                is_within_geofence=True,
            )
            event_id = event.attendance_id
        except Exception as e:
            raise StorageFailure("Could not save attendance event") from e

        self._set_status(new_status)
        logger.info(
            "User %s -> %s at (%s, %s) event=%s",
            self._user_id, new_status.value, location.lat, location.lng, event_id,
        )
        return ToggleOutcome(
            success=True,
            status=new_status,
            message="Clocked in successfully" if new_status is ClockStatus.CLOCK_IN else "Clocked out successfully",
            event=event,
            location=location,
            distance_meters=check.distance_meters,
        )

    def _set_status(self, status: ClockStatus) -> None:
        with self._state_lock:
            self._set_status_locked(status)

    def _set_status_locked(self, status: ClockStatus) -> None:
        if status is not self._status:
            self._generation += 1
        self._status = status

    def _require_session(self) -> AuthSession:
        try:
            return self._guard.require_session()
        except DomainError:
            raise
        except Exception as e:
            raise Unauthenticated("Could not verify your session") from e

    def _acquire_location(self, geolocation: GeolocationProvider) -> Coordinates:
        try:
            return geolocation.get_current_location()
        except (LocationError, ValidationError):
            raise
        except Exception as e:
            raise LocationError("Could not get your location") from e

    def _failure(self, error: DomainError) -> ToggleOutcome:
        distance = None
        location = None
        if isinstance(error, GeofenceViolation):
            message = str(error)
            distance = error.distance_meters
            location = error.location
            if error.distance_meters is not None and error.radius_meters is not None:
                message = f"{message} ({error.distance_meters:.0f}m away, limit {error.radius_meters:.0f}m)"
            logger.warning("Geofence violation for user %s: %s", self._user_id, message)
        elif isinstance(error, StorageFailure):
            message = "Could not record attendance, please try again"
            logger.error("Storage failure for user %s: %s", self._user_id, error, exc_info=error)
        elif isinstance(error, PositionError):
            try:
                message = _POSITION_MESSAGES[PositionErrorCode(error.code)]
            except ValueError:
                message = "Could not get your location"
            logger.warning("Location error for user %s: code=%s %s", self._user_id, error.code, error.message)
        elif isinstance(error, CapabilityUnavailable):
            message = "Geolocation is not supported by this device"
            logger.warning("No geolocation capability for user %s", self._user_id)
        elif isinstance(error, LocationError):
            message = str(error)
            logger.warning("Location error for user %s: %s", self._user_id, error, exc_info=error.__cause__ is not None)
        elif isinstance(error, ValidationError):
            message = f"Invalid location: {error}"
            logger.warning("Invalid location for user %s: %s", self._user_id, error)
        else:
            message = str(error)
            logger.warning(
                "Toggle aborted for user %s (%s): %s", self._user_id, error.kind, error,
                exc_info=error.__cause__ is not None,
            )

        return ToggleOutcome(
            success=False,
            status=self._status,
            message=message,
            error=error.kind,
            location=location,
            distance_meters=distance,
        )
