from __future__ import annotations

from enum import Enum


class ClockStatus(str, Enum):
    """Stored clock status; each event records the state being entered."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"

    def toggled(self) -> "ClockStatus":
        if self is ClockStatus.CLOCK_IN:
            return ClockStatus.CLOCK_OUT
        return ClockStatus.CLOCK_IN

    @property
    def action_label(self) -> str:
        """Label of the toggle control while the user is in this state."""
        return "Clock Out" if self is ClockStatus.CLOCK_IN else "Clock In"


class PositionErrorCode(int, Enum):
    """W3C GeolocationPositionError codes."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"
