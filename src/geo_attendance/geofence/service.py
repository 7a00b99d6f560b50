from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..common.validators import require_coordinates, require_non_empty, require_radius
from ..core.constants import DEFAULT_GEOFENCE_RADIUS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import GeofenceZone
from .registry import GeofenceRegistry
from .repository import GeofenceRepository

logger = logging.getLogger(__name__)

_NOT_SET: Any = object()


class GeofenceService:
    """Use case: admin management of geofence zones."""

    def __init__(self, zones: GeofenceRepository, registry: GeofenceRegistry):
        self._zones = zones
        self._registry = registry

    def list_active(self) -> list[GeofenceZone]:
        return self._registry.list_active()

    def list_zones(self, *, current_role: Role) -> Sequence[GeofenceZone]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can manage geofences")
        return self._zones.list_all()

    def upsert_zone(
        self,
        *,
        current_role: Role,
        zone_id: Optional[int] = None,
        name: Any = _NOT_SET,
        address: Any = _NOT_SET,
        latitude: Any = _NOT_SET,
        longitude: Any = _NOT_SET,
        radius: Any = _NOT_SET,
        is_active: Any = _NOT_SET,
    ) -> GeofenceZone:
        """Create a zone (``zone_id`` None) or partially update an existing one.

        Fields left unset keep their stored value on update; on create, ``radius``
        defaults to 100 m and ``is_active`` to True.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can manage geofences")

        if zone_id is None:
            zone = self._create(
                name=name,
                address=address,
                latitude=latitude,
                longitude=longitude,
                radius=DEFAULT_GEOFENCE_RADIUS if radius is _NOT_SET else radius,
                is_active=True if is_active is _NOT_SET else is_active,
            )
            logger.info("Created geofence zone %s (%s) radius=%sm", zone.zone_id, zone.name, zone.radius)
        else:
            zone = self._update(
                int(zone_id),
                name=name,
                address=address,
                latitude=latitude,
                longitude=longitude,
                radius=radius,
                is_active=is_active,
            )
            logger.info("Updated geofence zone %s (%s) active=%s", zone.zone_id, zone.name, zone.is_active)

        self._registry.invalidate()
        return zone

    def _create(self, *, name, address, latitude, longitude, radius, is_active) -> GeofenceZone:
        name = require_non_empty(None if name is _NOT_SET else name, "name")
        address = require_non_empty(None if address is _NOT_SET else address, "address")
        lat, lon = require_coordinates(
            None if latitude is _NOT_SET else latitude,
            None if longitude is _NOT_SET else longitude,
        )
        return self._zones.create(
            name=name,
            address=address,
            latitude=lat,
            longitude=lon,
            radius=require_radius(radius),
            is_active=_as_bool(is_active),
        )

    def _update(self, zone_id: int, *, name, address, latitude, longitude, radius, is_active) -> GeofenceZone:
        current = self._zones.get_by_id(zone_id)
        if not current:
            raise ValidationError("Geofence zone not found", field="id")

        changes: dict[str, Any] = {}
        if name is not _NOT_SET:
            changes["name"] = require_non_empty(name, "name")
        if address is not _NOT_SET:
            changes["address"] = require_non_empty(address, "address")
        if latitude is not _NOT_SET or longitude is not _NOT_SET:
            lat, lon = require_coordinates(
                current.latitude if latitude is _NOT_SET else latitude,
                current.longitude if longitude is _NOT_SET else longitude,
            )
            changes["latitude"] = lat
            changes["longitude"] = lon
        if radius is not _NOT_SET:
            changes["radius"] = require_radius(radius)
        if is_active is not _NOT_SET:
            changes["is_active"] = _as_bool(is_active)

        saved = self._zones.update(replace(current, **changes))
        if not saved:
            raise ValidationError("Geofence zone not found", field="id")
        return saved


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "on"}:
            return True
        if v in {"0", "false", "no", "off"}:
            return False
    if isinstance(value, int):
        return bool(value)
    raise ValidationError("isActive must be a boolean", field="isActive")
