from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import ClockStatus
from .model import AttendanceEvent


class AttendanceEventRepository(Protocol):
    """Append-only store of attendance events.

    Services depend on this interface, never on a concrete database.
    """

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def insert_event(
        self,
        *,
        user_id: int,
        status: ClockStatus,
        location_lat: float,
        location_lng: float,
        device_info: Dict[str, Any],
        is_within_geofence: bool,
    ) -> AttendanceEvent:
        raise NotImplementedError
