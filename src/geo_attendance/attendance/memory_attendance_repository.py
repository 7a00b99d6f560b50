from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord
from .repository import AttendanceRepository


class MemoryAttendanceRepository(AttendanceRepository):
    """Process-local store; one lock serializes every read-modify-write."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[int, AttendanceRecord] = {}
        self._open_by_user: dict[int, int] = {}
        self._next_id = 1

    def get_open_record(self, user_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            record_id = self._open_by_user.get(int(user_id))
            return self._records[record_id] if record_id is not None else None

    def create_record_if_none_open(
        self,
        user_id: int,
        *,
        check_in_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        with self._lock:
            if int(user_id) in self._open_by_user:
                return None

            record = AttendanceRecord(
                record_id=self._next_id,
                user_id=int(user_id),
                check_in_time=check_in_time,
                check_in_latitude=latitude,
                check_in_longitude=longitude,
                status=AttendanceStatus.CHECKED_IN,
                notes=notes,
            )
            self._next_id += 1
            self._records[record.record_id] = record
            self._open_by_user[record.user_id] = record.record_id
            return record

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
        with self._lock:
            current = self._records.get(int(record_id))
            if current is None or not current.is_open:
                return None

            closed = replace(
                current,
                check_out_time=check_out_time,
                check_out_latitude=latitude,
                check_out_longitude=longitude,
                total_hours=total_hours,
                status=AttendanceStatus.CHECKED_OUT,
                notes=notes,
            )
            self._records[closed.record_id] = closed
            del self._open_by_user[closed.user_id]
            return closed

    def list_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        return self.list_all(limit, AttendanceFilter(user_id=int(user_id)))

    def list_all(self, limit: int, filters: Optional[AttendanceFilter] = None) -> Sequence[AttendanceRecord]:
        filters = filters or AttendanceFilter()
        with self._lock:
            items = [r for r in self._records.values() if filters.matches(r)]
        items.sort(key=lambda r: (r.check_in_time, r.record_id), reverse=True)
        return items[: int(limit)]
