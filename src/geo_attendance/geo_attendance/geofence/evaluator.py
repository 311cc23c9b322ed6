"""Geofence evaluation.

Distances use the haversine great-circle formula on a spherical earth
(radius 6,371,000 m). Comparison against the radius is inclusive and done on
the raw double, without rounding.
"""
from __future__ import annotations

import logging
import math

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import StorageFailure
from .model import GeofenceCheck
from .repository import GeofenceSettingRepository

logger = logging.getLogger(__name__)


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points.
    a = min(1.0, a)
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class GeofenceEvaluator:
    def __init__(self, settings: GeofenceSettingRepository):
        self._settings = settings

    def evaluate(self, lat: float, lng: float) -> GeofenceCheck:
        try:
            setting = self._settings.get_active()
        except Exception as e:
            raise StorageFailure("Could not read geofence settings") from e

        if setting is None:
            # Fail-open: no active zone means every location is accepted.
            return GeofenceCheck(inside=True)

        distance = haversine_distance(lat, lng, setting.center_lat, setting.center_lng)
        logger.debug(
            "Geofence %s: point=(%s, %s) distance=%.2fm radius=%.2fm",
            setting.geofence_id, lat, lng, distance, setting.radius_meters,
        )
        return GeofenceCheck(
            inside=distance <= setting.radius_meters,
            distance_meters=distance,
            radius_meters=setting.radius_meters,
        )

    def is_within_geofence(self, lat: float, lng: float) -> bool:
        return self.evaluate(lat, lng).inside
