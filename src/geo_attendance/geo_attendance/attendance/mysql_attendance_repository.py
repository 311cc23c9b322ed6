from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import ClockStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import AttendanceEvent
from .repository import AttendanceEventRepository

_COLUMNS = """
    attendance_id, user_id, status, created_at,
    location_lat, location_lng, device_info, is_within_geofence
"""


def _to_event(r: Dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        status=ClockStatus(r["status"]),
        timestamp=r["created_at"],
        location_lat=float(r["location_lat"]),
        location_lng=float(r["location_lng"]),
        is_within_geofence=bool(r["is_within_geofence"]),
        device_info=load_json(r.get("device_info")),
    )


class MySQLAttendanceEventRepository(AttendanceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY created_at DESC, attendance_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY created_at DESC, attendance_id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_event(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, status, location_lat, location_lng, device_info, is_within_geofence
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    status.value,
                    float(location_lat),
                    float(location_lng),
                    dump_json(device_info),
                    1 if is_within_geofence else 0,
                ),
            )
            attendance_id = int(cur.lastrowid)
            # Read back the store-assigned timestamp in the same transaction.
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (attendance_id,),
            )
            return _to_event(fetchone(cur))
