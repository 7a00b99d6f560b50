from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import hours_between, now_utc
from ..common.validators import require_coordinates, require_optional_str
from ..core.constants import DEFAULT_ADMIN_LIMIT, DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    NoActiveSession,
    NoGeofenceConfigured,
    OutsideGeofence,
)
from ..geofence.evaluator import evaluate_against_nearest
from ..geofence.model import GeofenceEvaluation
from ..geofence.registry import GeofenceRegistry
from .model import AttendanceFilter, AttendanceRecord, CheckInResult, CheckOutResult, SessionStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    notes = require_optional_str(notes, "notes")
    if notes is None:
        return None
    notes = notes.strip()
    return notes or None


class AttendanceSessionManager:
    """Use case: check-in / check-out with geofence validation.

    A user is either without an open session or has exactly one ``checked_in`` record.
    Check-in requires an active zone and a position inside the nearest one. Check-out
    only records the geofence result: leaving the area must never leave a session stuck
    open.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        registry: GeofenceRegistry,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._registry = registry
        self._clock = clock

    def check_in(
        self,
        user_id: int,
        latitude: float,
        longitude: float,
        notes: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> CheckInResult:
        lat, lon = require_coordinates(latitude, longitude)
        notes = _clean_notes(notes)

        if self._attendance.get_open_record(user_id):
            raise AlreadyCheckedIn("You are already checked in")

        zones = self._registry.list_active()
        evaluation = evaluate_against_nearest(lat, lon, zones)
        if evaluation is None:
            raise NoGeofenceConfigured("No active geofence configured. Please contact your administrator.")
        if not evaluation.is_inside:
            raise OutsideGeofence(
                distance_meters=evaluation.distance_meters,
                allowed_radius=evaluation.allowed_radius,
                zone_name=evaluation.zone.name,
            )

        record = self._attendance.create_record_if_none_open(
            user_id,
            check_in_time=now or self._clock(),
            latitude=lat,
            longitude=lon,
            notes=notes,
        )
        if record is None:
            # Another request opened a session between our read and the insert.
            logger.warning("Concurrent check-in rejected for user %s", user_id)
            raise AlreadyCheckedIn("You are already checked in")

        logger.info(
            "User %s checked in (record %s) at %s, %.2fm from %s",
            user_id,
            record.record_id,
            record.check_in_time.isoformat(),
            evaluation.distance_meters,
            evaluation.zone.name,
        )
        return CheckInResult(record=record, geofence=evaluation)

    def check_out(
        self,
        user_id: int,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        notes: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> CheckOutResult:
        active = self._attendance.get_open_record(user_id)
        if not active:
            raise NoActiveSession("No active check-in found")
        new_notes = _clean_notes(notes)

        lat: Optional[float] = None
        lon: Optional[float] = None
        evaluation: Optional[GeofenceEvaluation] = None
        if (latitude is None) != (longitude is None):
            # Incomplete position is stored as none.
            logger.warning("Check-out for user %s ignored an incomplete position", user_id)
        elif latitude is not None:
            lat, lon = require_coordinates(latitude, longitude)
            evaluation = evaluate_against_nearest(lat, lon, self._registry.list_active())
            if evaluation and not evaluation.is_inside:
                logger.warning(
                    "Check-out outside geofence: user %s is %sm from %s (allowed: %sm)",
                    user_id,
                    evaluation.distance_meters,
                    evaluation.zone.name,
                    evaluation.allowed_radius,
                )

        check_out_time = now or self._clock()
        closed = self._attendance.close_record(
            active.record_id,
            check_out_time=check_out_time,
            latitude=lat,
            longitude=lon,
            total_hours=hours_between(active.check_in_time, check_out_time),
            notes=new_notes if new_notes is not None else active.notes,
        )
        if closed is None:
            raise NoActiveSession("No active check-in found")

        logger.info("User %s checked out (record %s), %s hours", user_id, closed.record_id, closed.total_hours)
        return CheckOutResult(record=closed, geofence=evaluation)

    def get_status(self, user_id: int) -> SessionStatus:
        active = self._attendance.get_open_record(user_id)
        return SessionStatus(is_checked_in=active is not None, active_record=active)

    def list_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(user_id, limit)

    def list_all_records(
        self,
        *,
        current_role: Role,
        limit: int = DEFAULT_ADMIN_LIMIT,
        filters: Optional[AttendanceFilter] = None,
    ) -> Sequence[AttendanceRecord]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can view all attendance records")
        return self._attendance.list_all(limit, filters)
