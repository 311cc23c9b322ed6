from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is invalid")
    return value.strip()


def require_float(value: Any, field_name: str) -> float:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(f"{field_name} is invalid")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} is invalid")
    return number


def require_latitude(value: Any) -> float:
    lat = require_float(value, "Latitude")
    if not -90.0 <= lat <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90")
    return lat


def require_longitude(value: Any) -> float:
    lng = require_float(value, "Longitude")
    if not -180.0 <= lng <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180")
    return lng
