"""Geofence geometry.

Great-circle distance (Haversine) and point-in-circle checks. Everything here is pure:
no I/O, no state.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeofenceEvaluation, GeofenceZone


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance between two points on Earth.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance between the two points in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def _evaluate_with_distance(distance: float, zone: GeofenceZone) -> GeofenceEvaluation:
    # Containment uses the raw distance; the reported one is rounded for display.
    return GeofenceEvaluation(
        is_inside=distance <= zone.radius,
        distance_meters=round(distance, 2),
        allowed_radius=zone.radius,
        zone=zone,
    )


def evaluate(latitude: float, longitude: float, zone: GeofenceZone) -> GeofenceEvaluation:
    """Check a position against a single zone (boundary inclusive)."""
    distance = distance_meters(latitude, longitude, zone.latitude, zone.longitude)
    return _evaluate_with_distance(distance, zone)


def evaluate_against_nearest(
    latitude: float, longitude: float, zones: Sequence[GeofenceZone]
) -> Optional[GeofenceEvaluation]:
    """Evaluate against the closest zone, or None when there are no zones.

    Ties go to the zone listed first.
    """
    nearest: Optional[GeofenceZone] = None
    shortest = math.inf
    for zone in zones:
        distance = distance_meters(latitude, longitude, zone.latitude, zone.longitude)
        if distance < shortest:
            nearest, shortest = zone, distance

    if nearest is None:
        return None
    return _evaluate_with_distance(shortest, nearest)
