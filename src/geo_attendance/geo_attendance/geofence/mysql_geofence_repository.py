from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import GeofenceSetting
from .repository import GeofenceSettingRepository


class MySQLGeofenceSettingRepository(GeofenceSettingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[GeofenceSetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT geofence_id, name, center_lat, center_lng, radius_meters, is_active
                FROM geofence_settings
                WHERE is_active=1
                ORDER BY updated_at DESC, geofence_id DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return GeofenceSetting(
                geofence_id=int(r["geofence_id"]),
                name=r.get("name") or "Office",
                center_lat=float(r["center_lat"]),
                center_lng=float(r["center_lng"]),
                radius_meters=float(r["radius_meters"]),
                is_active=bool(r["is_active"]),
            )
