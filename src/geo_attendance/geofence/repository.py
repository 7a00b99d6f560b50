from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GeofenceZone


class GeofenceRepository(Protocol):
    """Storage port for admin-managed zones."""

    def list_active(self) -> Sequence[GeofenceZone]:
        raise NotImplementedError

    def list_all(self) -> Sequence[GeofenceZone]:
        raise NotImplementedError

    def get_by_id(self, zone_id: int) -> Optional[GeofenceZone]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, zone: GeofenceZone) -> Optional[GeofenceZone]:
        """Persist every field of ``zone``. Returns None when the id is unknown."""

        raise NotImplementedError
