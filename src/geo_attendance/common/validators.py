from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_GEOFENCE_RADIUS, MIN_GEOFENCE_RADIUS
from ..core.exceptions import InvalidCoordinates, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def require_float(value: Any, field_name: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number", field=field_name)


def require_coordinates(latitude: Any, longitude: Any) -> tuple[float, float]:
    """Coerce and range-check a lat/lon pair."""
    try:
        lat = require_float(latitude, "latitude")
        lon = require_float(longitude, "longitude")
    except ValidationError as e:
        raise InvalidCoordinates(str(e), field=e.field)

    if not (-90 <= lat <= 90):
        raise InvalidCoordinates("Latitude must be between -90 and 90", field="latitude")
    if not (-180 <= lon <= 180):
        raise InvalidCoordinates("Longitude must be between -180 and 180", field="longitude")
    return lat, lon


def require_radius(value: Any) -> float:
    radius = require_float(value, "radius")
    if radius <= MIN_GEOFENCE_RADIUS or radius > MAX_GEOFENCE_RADIUS:
        raise ValidationError(
            f"Radius must be greater than {MIN_GEOFENCE_RADIUS} and at most {MAX_GEOFENCE_RADIUS} meters",
            field="radius",
        )
    return radius


def require_limit(value: Any, *, default: int, maximum: int) -> int:
    if value in (None, ""):
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer", field="limit")
    if limit <= 0:
        raise ValidationError("limit must be positive", field="limit")
    return min(limit, maximum)


def require_optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string", field=field_name)
    return value
