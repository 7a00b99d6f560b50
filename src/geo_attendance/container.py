from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType

from .attendance.memory_attendance_repository import MemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceSessionManager
from .core.constants import DEFAULT_ADMIN_LIMIT, DEFAULT_HISTORY_LIMIT
from .database.connection import DatabaseConnection, DBConfig
from .geofence.memory_geofence_repository import MemoryGeofenceRepository
from .geofence.mysql_geofence_repository import MySQLGeofenceRepository
from .geofence.registry import GeofenceRegistry
from .geofence.repository import GeofenceRepository
from .geofence.service import GeofenceService


@dataclass(frozen=True)
class Container:
    zones_repo: GeofenceRepository
    attendance_repo: AttendanceRepository

    geofence_registry: GeofenceRegistry
    geofence_service: GeofenceService
    attendance_manager: AttendanceSessionManager

    default_history_limit: int = DEFAULT_HISTORY_LIMIT
    default_admin_limit: int = DEFAULT_ADMIN_LIMIT


def _build_repositories(settings: ModuleType) -> tuple[GeofenceRepository, AttendanceRepository]:
    backend = str(getattr(settings, "STORAGE_BACKEND", "mysql")).lower()
    if backend == "memory":
        return MemoryGeofenceRepository(), MemoryAttendanceRepository()
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        return MySQLGeofenceRepository(conn), MySQLAttendanceRepository(conn)
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


def build_container(settings: ModuleType) -> Container:
    zones_repo, attendance_repo = _build_repositories(settings)

    registry = GeofenceRegistry(zones_repo, cache_seconds=float(getattr(settings, "GEOFENCE_CACHE_SECONDS", 0)))
    geofence_service = GeofenceService(zones_repo, registry)
    attendance_manager = AttendanceSessionManager(attendance_repo, registry)

    return Container(
        zones_repo=zones_repo,
        attendance_repo=attendance_repo,
        geofence_registry=registry,
        geofence_service=geofence_service,
        attendance_manager=attendance_manager,
        default_history_limit=int(getattr(settings, "DEFAULT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)),
        default_admin_limit=int(getattr(settings, "DEFAULT_ADMIN_LIMIT", DEFAULT_ADMIN_LIMIT)),
    )
