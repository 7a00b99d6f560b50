from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import AttendanceFilter, AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage port for attendance records.

    Implementations must make ``create_record_if_none_open`` atomic: the "is there an
    open record for this user" check and the insert happen as one operation.
    """

    def get_open_record(self, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_record_if_none_open(
        self,
        user_id: int,
        *,
        check_in_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """Returns the new record, or None if the user already has an open one."""

        raise NotImplementedError

    def close_record(
        self,
        record_id: int,
        *,
        check_out_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        total_hours: Decimal,
        notes: Optional[str],
    ) -> Optional[AttendanceRecord]:
        """Close an open record. Returns None if it is not open (anymore)."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        """Newest check-in first."""

        raise NotImplementedError

    def list_all(self, limit: int, filters: Optional[AttendanceFilter] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
