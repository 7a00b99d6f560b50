from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class GeofenceZone:
    """Thực thể miền (domain): Vùng địa lý hợp lệ để chấm công (tâm + bán kính)."""

    zone_id: int
    name: str
    address: str
    latitude: float
    longitude: float
    radius: float
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.zone_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class GeofenceEvaluation:
    """Result of checking one position against one zone."""

    is_inside: bool
    distance_meters: float
    allowed_radius: float
    zone: GeofenceZone

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_inside,
            "distance": self.distance_meters,
            "allowedRadius": self.allowed_radius,
            "geofenceName": self.zone.name,
            "geofenceId": self.zone.zone_id,
        }
