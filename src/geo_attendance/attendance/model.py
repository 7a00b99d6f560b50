from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..geofence.model import GeofenceEvaluation


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Một phiên chấm công (vào ca -> tan ca)."""

    record_id: int
    user_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None
    total_hours: Optional[Decimal] = None
    status: AttendanceStatus = AttendanceStatus.CHECKED_IN
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == AttendanceStatus.CHECKED_IN

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "userId": self.user_id,
            "checkInTime": _iso(self.check_in_time),
            "checkOutTime": _iso(self.check_out_time),
            "checkInLatitude": self.check_in_latitude,
            "checkInLongitude": self.check_in_longitude,
            "checkOutLatitude": self.check_out_latitude,
            "checkOutLongitude": self.check_out_longitude,
            "totalHours": float(self.total_hours) if self.total_hours is not None else None,
            "status": self.status.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceFilter:
    """Admin listing filters; ``start``/``end`` bound check-in time inclusively."""

    user_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def matches(self, record: AttendanceRecord) -> bool:
        if self.user_id is not None and record.user_id != self.user_id:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.start is not None and record.check_in_time < self.start:
            return False
        if self.end is not None and record.check_in_time > self.end:
            return False
        return True


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    geofence: GeofenceEvaluation

    def to_dict(self) -> dict:
        return {"record": self.record.to_dict(), "geofenceValidation": self.geofence.to_dict()}


@dataclass(frozen=True)
class CheckOutResult:
    record: AttendanceRecord
    geofence: Optional[GeofenceEvaluation] = None

    def to_dict(self) -> dict:
        return {
            "record": self.record.to_dict(),
            "geofenceValidation": self.geofence.to_dict() if self.geofence else None,
        }


@dataclass(frozen=True)
class SessionStatus:
    is_checked_in: bool
    active_record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        return {
            "isCheckedIn": self.is_checked_in,
            "activeRecord": self.active_record.to_dict() if self.active_record else None,
        }
