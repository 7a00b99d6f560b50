from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode, errors

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceFilter, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    attendance_id, user_id, check_in_time, check_out_time,
    check_in_latitude, check_in_longitude, check_out_latitude, check_out_longitude,
    total_hours, status, notes
"""


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    total = r.get("total_hours")
    return AttendanceRecord(
        record_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        check_in_latitude=_opt_float(r.get("check_in_latitude")),
        check_in_longitude=_opt_float(r.get("check_in_longitude")),
        check_out_latitude=_opt_float(r.get("check_out_latitude")),
        check_out_longitude=_opt_float(r.get("check_out_longitude")),
        total_hours=Decimal(str(total)) if total is not None else None,
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """MySQL adapter.

    The single-open-session rule is enforced by the ``uq_attendance_open_session`` unique
    key on a generated column, so a racing insert fails with ER_DUP_ENTRY instead of
    creating a second open record.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_open_record(self, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND status=%s",
                (int(user_id), AttendanceStatus.CHECKED_IN.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record_if_none_open(
        self,
        user_id: int,
        *,
        check_in_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, check_in_time, check_in_latitude, check_in_longitude, status, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), check_in_time, latitude, longitude, AttendanceStatus.CHECKED_IN.value, notes),
                )
                record_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (record_id,))
                return _to_record(fetchone(cur))
        except errors.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                logger.info("Open session already exists for user %s", user_id)
                return None
            raise

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_latitude=%s, check_out_longitude=%s,
                    total_hours=%s, status=%s, notes=%s
                WHERE attendance_id=%s AND status=%s
                """,
                (
                    check_out_time,
                    latitude,
                    longitude,
                    total_hours,
                    AttendanceStatus.CHECKED_OUT.value,
                    notes,
                    int(record_id),
                    AttendanceStatus.CHECKED_IN.value,
                ),
            )
            if cur.rowcount <= 0:
                return None
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(record_id),))
            return _to_record(fetchone(cur))

    def list_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        return self.list_all(limit, AttendanceFilter(user_id=int(user_id)))

    def list_all(self, limit: int, filters: Optional[AttendanceFilter] = None) -> Sequence[AttendanceRecord]:
        filters = filters or AttendanceFilter()
        clauses: list[str] = []
        params: list[object] = []

        if filters.user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(filters.user_id))
        if filters.status is not None:
            clauses.append("status=%s")
            params.append(filters.status.value)
        if filters.start is not None:
            clauses.append("check_in_time >= %s")
            params.append(filters.start)
        if filters.end is not None:
            clauses.append("check_in_time <= %s")
            params.append(filters.end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY check_in_time DESC, attendance_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
