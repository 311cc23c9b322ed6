from __future__ import annotations

from ..core.enums import ClockStatus
from ..core.exceptions import StorageFailure
from .repository import AttendanceEventRepository


class AttendanceStateResolver:
    """Derive a user's current clock state from their latest event."""

    def __init__(self, events: AttendanceEventRepository):
        self._events = events

    def resolve_current_status(self, user_id: int) -> ClockStatus:
        try:
            latest = self._events.get_latest_for_user(int(user_id))
        except Exception as e:
            # Never default to CLOCK_OUT on an outage.
            raise StorageFailure("Could not read attendance status") from e

        if latest is None:
            return ClockStatus.CLOCK_OUT
        return latest.status
