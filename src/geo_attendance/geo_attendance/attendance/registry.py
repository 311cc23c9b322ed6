from __future__ import annotations

import threading
from typing import Dict

from ..auth.session_guard import SessionGuard
from ..geofence.evaluator import GeofenceEvaluator
from .recorder import AttendanceRecorder
from .repository import AttendanceEventRepository
from .resolver import AttendanceStateResolver


class RecorderRegistry:
    """Hands out exactly one AttendanceRecorder per user within this process."""

    def __init__(
        self,
        *,
        session_guard: SessionGuard,
        resolver: AttendanceStateResolver,
        evaluator: GeofenceEvaluator,
        events: AttendanceEventRepository,
    ):
        self._guard = session_guard
        self._resolver = resolver
        self._evaluator = evaluator
        self._events = events
        self._recorders: Dict[int, AttendanceRecorder] = {}
        self._lock = threading.Lock()

    def for_user(self, user_id: int) -> AttendanceRecorder:
        user_id = int(user_id)
        with self._lock:
            recorder = self._recorders.get(user_id)
            if recorder is None:
                recorder = AttendanceRecorder(
                    user_id,
                    session_guard=self._guard,
                    resolver=self._resolver,
                    evaluator=self._evaluator,
                    events=self._events,
                )
                self._recorders[user_id] = recorder
            return recorder
