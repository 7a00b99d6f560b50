"""Ví dụ: dùng service layer (không qua Flask).

Runs against the in-memory backend: one zone, one check-in, one check-out.
"""

from datetime import datetime

from geo_attendance.config import testing as settings
from geo_attendance.container import build_container
from geo_attendance.core.enums import Role


def main():
    container = build_container(settings)
    container.geofence_service.upsert_zone(
        current_role=Role.ADMIN,
        name="HQ",
        address="1 Market St, San Francisco",
        latitude=37.7749,
        longitude=-122.4194,
        radius=100,
    )

    manager = container.attendance_manager
    manager.check_in(1, 37.7749, -122.4194, now=datetime(2026, 2, 1, 9, 0, 0))
    result = manager.check_out(1, now=datetime(2026, 2, 1, 17, 30, 0))
    print(result.to_dict())


if __name__ == "__main__":
    main()
