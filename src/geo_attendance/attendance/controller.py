from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Optional

from flask import Flask, jsonify, request

from ..common.auth import admin_required, staff_required
from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response
from ..common.validators import require_limit
from ..core.constants import MAX_LIST_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container
from ..users.model import Principal
from .model import AttendanceFilter


def _parse_bound(value: Optional[str], field: str, *, end_of_day: bool) -> Optional[datetime]:
    if not value:
        return None
    try:
        if len(value) == 10:
            d = parse_iso_date(value)
            return datetime.combine(d, time.max if end_of_day else time.min)
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} must be YYYY-MM-DD or an ISO timestamp", field=field)
    if parsed.tzinfo is not None:
        # Stored timestamps are naive UTC.
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_filters(args) -> AttendanceFilter:
    user_id = args.get("user_id")
    status = args.get("status")
    try:
        user_id = int(user_id) if user_id else None
    except ValueError:
        raise ValidationError("user_id must be an integer", field="user_id")
    try:
        status = AttendanceStatus(status) if status else None
    except ValueError:
        raise ValidationError("status must be checked_in or checked_out", field="status")

    return AttendanceFilter(
        user_id=user_id,
        status=status,
        start=_parse_bound(args.get("start"), "start", end_of_day=False),
        end=_parse_bound(args.get("end"), "end", end_of_day=True),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @staff_required
    def check_in(principal: Principal):
        data = request.get_json(silent=True) or {}
        try:
            result = container.attendance_manager.check_in(
                principal.user_id,
                data.get("latitude"),
                data.get("longitude"),
                data.get("notes"),
            )
        except Exception as e:
            return error_response(e)
        return jsonify(result.to_dict()), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @staff_required
    def check_out(principal: Principal):
        data = request.get_json(silent=True) or {}
        try:
            result = container.attendance_manager.check_out(
                principal.user_id,
                data.get("latitude"),
                data.get("longitude"),
                data.get("notes"),
            )
        except Exception as e:
            return error_response(e)
        return jsonify(result.to_dict()), 200

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @staff_required
    def status(principal: Principal):
        try:
            current = container.attendance_manager.get_status(principal.user_id)
        except Exception as e:
            return error_response(e)
        return jsonify(current.to_dict())

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @staff_required
    def history(principal: Principal):
        try:
            limit = require_limit(
                request.args.get("limit"), default=container.default_history_limit, maximum=MAX_LIST_LIMIT
            )
            records = container.attendance_manager.list_history(principal.user_id, limit=limit)
        except Exception as e:
            return error_response(e)
        return jsonify({"records": [r.to_dict() for r in records]})

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance(principal: Principal):
        try:
            limit = require_limit(
                request.args.get("limit"), default=container.default_admin_limit, maximum=MAX_LIST_LIMIT
            )
            records = container.attendance_manager.list_all_records(
                current_role=principal.role,
                limit=limit,
                filters=_parse_filters(request.args),
            )
        except Exception as e:
            return error_response(e)
        return jsonify({"records": [r.to_dict() for r in records]})
