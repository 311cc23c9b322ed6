from __future__ import annotations

from typing import List

from ..common.datetime_utils import format_timestamp
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ClockStatus
from ..core.exceptions import StorageFailure
from .model import AttendanceEvent
from .repository import AttendanceEventRepository


class AttendanceService:
    """Read-side use cases for the dashboard (history list)."""

    def __init__(self, events: AttendanceEventRepository, *, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._events = events
        self._history_limit = int(history_limit)

    def get_history_ui(self, user_id: int, *, limit: int | None = None) -> List[dict]:
        limit = self._history_limit if limit is None else max(1, min(int(limit), self._history_limit))
        try:
            rows = self._events.get_recent_for_user(int(user_id), limit)
        except Exception as e:
            raise StorageFailure("Could not read attendance history") from e
        return [self._to_ui(r) for r in rows]

    def _to_ui(self, r: AttendanceEvent) -> dict:
        label = {
            ClockStatus.CLOCK_IN: "Clocked in",
            ClockStatus.CLOCK_OUT: "Clocked out",
        }[r.status]

        css = {
            ClockStatus.CLOCK_IN: "bg-success",
            ClockStatus.CLOCK_OUT: "bg-secondary",
        }[r.status]

        return {
            "id": r.attendance_id,
            "status": r.status.value,
            "label": label,
            "css_class": css,
            "timestamp": format_timestamp(r.timestamp),
            "location": {"lat": r.location_lat, "lng": r.location_lng},
            "is_within_geofence": r.is_within_geofence,
        }
