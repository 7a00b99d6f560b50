from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import GeofenceZone
from .repository import GeofenceRepository

_COLUMNS = "zone_id, name, address, latitude, longitude, radius, is_active, created_at, updated_at"


def _to_zone(r: Dict[str, Any]) -> GeofenceZone:
    return GeofenceZone(
        zone_id=int(r["zone_id"]),
        name=r["name"],
        address=r.get("address") or "",
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius=float(r["radius"]),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLGeofenceRepository(GeofenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[GeofenceZone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM geofence_zones WHERE is_active=1 ORDER BY zone_id")
            return [_to_zone(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[GeofenceZone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM geofence_zones ORDER BY zone_id")
            return [_to_zone(r) for r in fetchall(cur)]

    def get_by_id(self, zone_id: int) -> Optional[GeofenceZone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM geofence_zones WHERE zone_id=%s", (int(zone_id),))
            r = fetchone(cur)
            return _to_zone(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO geofence_zones(name, address, latitude, longitude, radius, is_active)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, address, latitude, longitude, radius, int(bool(is_active))),
            )
            zone_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM geofence_zones WHERE zone_id=%s", (zone_id,))
            return _to_zone(fetchone(cur))

    def update(self, zone: GeofenceZone) -> Optional[GeofenceZone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE geofence_zones
                SET name=%s, address=%s, latitude=%s, longitude=%s, radius=%s, is_active=%s
                WHERE zone_id=%s
                """,
                (
                    zone.name,
                    zone.address,
                    zone.latitude,
                    zone.longitude,
                    zone.radius,
                    int(bool(zone.is_active)),
                    int(zone.zone_id),
                ),
            )
            # rowcount is 0 for an unchanged row too, so re-read instead of trusting it.
            cur.execute(f"SELECT {_COLUMNS} FROM geofence_zones WHERE zone_id=%s", (int(zone.zone_id),))
            r = fetchone(cur)
            return _to_zone(r) if r else None
