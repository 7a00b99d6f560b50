from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Trạng thái phiên chấm công lưu trong CSDL."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
