from __future__ import annotations

import threading
import time
from typing import Callable, Optional, Sequence

from .model import GeofenceZone
from .repository import GeofenceRepository


class GeofenceRegistry:
    """Read-mostly view over the active zones.

    With ``cache_seconds > 0`` the active set is cached for that long. Admin writes made
    through ``GeofenceService`` call ``invalidate()`` so the next read sees them.
    """

    def __init__(
        self,
        zones: GeofenceRepository,
        *,
        cache_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._zones = zones
        self._cache_seconds = float(cache_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: Optional[tuple[GeofenceZone, ...]] = None
        self._loaded_at = 0.0

    def list_active(self) -> list[GeofenceZone]:
        if self._cache_seconds <= 0:
            return list(self._zones.list_active())

        with self._lock:
            now = self._clock()
            if self._cached is None or now - self._loaded_at >= self._cache_seconds:
                self._cached = tuple(self._zones.list_active())
                self._loaded_at = now
            return list(self._cached)

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None
