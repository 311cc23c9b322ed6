from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

import pytest

from geo_attendance.attendance.model import AttendanceEvent
from geo_attendance.attendance.recorder import AttendanceRecorder
from geo_attendance.attendance.resolver import AttendanceStateResolver
from geo_attendance.auth.session_guard import AuthSession, SessionGuard
from geo_attendance.core.enums import ClockStatus
from geo_attendance.geofence.evaluator import GeofenceEvaluator
from geo_attendance.geofence.model import GeofenceSetting
from geo_attendance.geolocation.provider import GeolocationProvider


class InMemoryEvents:
    """Append-only fake of attendance_records; timestamps increase per insert."""

    def __init__(self, *, start: datetime = datetime(2026, 2, 1, 8, 0, 0)):
        self.rows: List[AttendanceEvent] = []
        self._clock = start
        self.fail_reads = False
        self.fail_writes = False
        self.reads = 0

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceEvent]:
        self.reads += 1
        if self.fail_reads:
            raise ConnectionError("database unreachable")
        mine = [r for r in self.rows if r.user_id == user_id]
        if not mine:
            return None
        return max(mine, key=lambda r: (r.timestamp, r.attendance_id))

    def get_recent_for_user(self, user_id: int, limit: int):
        self.reads += 1
        if self.fail_reads:
            raise ConnectionError("database unreachable")
        mine = [r for r in self.rows if r.user_id == user_id]
        mine.sort(key=lambda r: (r.timestamp, r.attendance_id), reverse=True)
        return mine[:limit]

    def insert_event(self, *, user_id, status, location_lat, location_lng, device_info, is_within_geofence):
        if self.fail_writes:
            raise ConnectionError("insert failed")
        self._clock += timedelta(minutes=1)
        event = AttendanceEvent(
            attendance_id=len(self.rows) + 1,
            user_id=user_id,
            status=status,
            timestamp=self._clock,
            location_lat=location_lat,
            location_lng=location_lng,
            is_within_geofence=is_within_geofence,
            device_info=dict(device_info),
        )
        self.rows.append(event)
        return event

    def for_user(self, user_id: int) -> List[AttendanceEvent]:
        return sorted((r for r in self.rows if r.user_id == user_id), key=lambda r: r.timestamp)


class InMemoryGeofence:
    def __init__(self, setting: Optional[GeofenceSetting] = None):
        self.setting = setting
        self.fail = False

    def get_active(self) -> Optional[GeofenceSetting]:
        if self.fail:
            raise ConnectionError("database unreachable")
        return self.setting


class FakePlatform:
    """Stands in for navigator.geolocation: returns a fixed position or raises."""

    def __init__(self, lat: float = 10.0, lng: float = 10.0, *, error: Optional[Exception] = None):
        self.position: Mapping[str, Any] = {"coords": {"latitude": lat, "longitude": lng}}
        self.error = error
        self.calls = 0

    def get_current_position(self) -> Mapping[str, Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.position


class SessionState:
    """Mutable login state behind a SessionGuard."""

    def __init__(self, auth: Optional[AuthSession] = None):
        self.auth = auth

    def __call__(self) -> Optional[AuthSession]:
        return self.auth


@pytest.fixture
def office_geofence() -> GeofenceSetting:
    return GeofenceSetting(geofence_id=1, center_lat=10.0, center_lng=10.0, radius_meters=100.0)


@pytest.fixture
def events() -> InMemoryEvents:
    return InMemoryEvents()


@pytest.fixture
def geofence_repo(office_geofence) -> InMemoryGeofence:
    return InMemoryGeofence(office_geofence)


@pytest.fixture
def session_state() -> SessionState:
    return SessionState(AuthSession(user_id=1, full_name="Nguyen Van A", role="staff"))


@pytest.fixture
def guard(session_state) -> SessionGuard:
    return SessionGuard(session_state)


@pytest.fixture
def recorder(events, geofence_repo, guard) -> AttendanceRecorder:
    return AttendanceRecorder(
        1,
        session_guard=guard,
        resolver=AttendanceStateResolver(events),
        evaluator=GeofenceEvaluator(geofence_repo),
        events=events,
    )


@pytest.fixture
def at_office() -> GeolocationProvider:
    return GeolocationProvider(FakePlatform(10.0, 10.0))


@pytest.fixture
def far_away() -> GeolocationProvider:
    # ~1.5km from the office center
    return GeolocationProvider(FakePlatform(10.01, 10.01))


@pytest.fixture
def device_info() -> Dict[str, Any]:
    return {"user_agent": "pytest", "platform": "Linux", "vendor": "test"}
