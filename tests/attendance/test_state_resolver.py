from __future__ import annotations

import pytest

from geo_attendance.attendance.resolver import AttendanceStateResolver
from geo_attendance.core.enums import ClockStatus
from geo_attendance.core.exceptions import StorageFailure


def _insert(events, user_id, status):
    events.insert_event(
        user_id=user_id,
        status=status,
        location_lat=10.0,
        location_lng=10.0,
        device_info={},
        is_within_geofence=True,
    )


def test_user_without_events_is_clocked_out(events):
    assert AttendanceStateResolver(events).resolve_current_status(42) == ClockStatus.CLOCK_OUT


def test_latest_event_wins(events):
    _insert(events, 1, ClockStatus.CLOCK_IN)
    _insert(events, 1, ClockStatus.CLOCK_OUT)
    _insert(events, 1, ClockStatus.CLOCK_IN)

    assert AttendanceStateResolver(events).resolve_current_status(1) == ClockStatus.CLOCK_IN


def test_other_users_events_are_ignored(events):
    _insert(events, 2, ClockStatus.CLOCK_IN)

    resolver = AttendanceStateResolver(events)
    assert resolver.resolve_current_status(1) == ClockStatus.CLOCK_OUT
    assert resolver.resolve_current_status(2) == ClockStatus.CLOCK_IN


def test_query_failure_is_not_masked_as_clocked_out(events):
    events.fail_reads = True
    with pytest.raises(StorageFailure):
        AttendanceStateResolver(events).resolve_current_status(1)
