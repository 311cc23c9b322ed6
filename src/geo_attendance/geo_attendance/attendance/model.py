from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ..core.enums import ClockStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one clock-in or clock-out event.

    ``status`` is the state the user enters with this event.
    ``timestamp`` is assigned by the store on insert.
    """

    attendance_id: int
    user_id: int
    status: ClockStatus
    timestamp: datetime
    location_lat: float
    location_lng: float
    is_within_geofence: bool
    device_info: Dict[str, Any] = field(default_factory=dict)
