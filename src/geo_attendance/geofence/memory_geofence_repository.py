from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from .model import GeofenceZone
from .repository import GeofenceRepository


class MemoryGeofenceRepository(GeofenceRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._zones: dict[int, GeofenceZone] = {}
        self._next_id = 1

    def list_active(self) -> Sequence[GeofenceZone]:
        with self._lock:
            return [z for _, z in sorted(self._zones.items()) if z.is_active]

    def list_all(self) -> Sequence[GeofenceZone]:
        with self._lock:
            return [z for _, z in sorted(self._zones.items())]

    def get_by_id(self, zone_id: int) -> Optional[GeofenceZone]:
        with self._lock:
            return self._zones.get(int(zone_id))

    def create(
        self,
        *,
        name: str,
        address: str,
        latitude: float,
        longitude: float,
        radius: float,
        is_active: bool = True,
    ) -> GeofenceZone:
        now = now_utc()
        with self._lock:
            zone = GeofenceZone(
                zone_id=self._next_id,
                name=name,
                address=address,
                latitude=latitude,
                longitude=longitude,
                radius=radius,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
            self._zones[zone.zone_id] = zone
            self._next_id += 1
            return zone

    def update(self, zone: GeofenceZone) -> Optional[GeofenceZone]:
        with self._lock:
            current = self._zones.get(zone.zone_id)
            if current is None:
                return None
            saved = replace(zone, created_at=current.created_at, updated_at=now_utc())
            self._zones[zone.zone_id] = saved
            return saved
