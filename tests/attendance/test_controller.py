from __future__ import annotations

from datetime import datetime

import pytest

from geo_attendance.core.enums import Role
from geo_attendance.main import create_app

HQ = {"latitude": 37.7749, "longitude": -122.4194}


@pytest.fixture()
def app():
    return create_app("geo_attendance.config.testing")


@pytest.fixture()
def container(app):
    return app.extensions["geo_attendance"]


def _client(app, *, user_id=None, role=None, is_active=True):
    client = app.test_client()
    if user_id is not None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role
            sess["is_active"] = is_active
    return client


def _seed_zone(container, radius=100):
    return container.geofence_service.upsert_zone(
        current_role=Role.ADMIN, name="HQ", address="1 Market St", radius=radius, **HQ
    )


def test_requires_authentication(app):
    resp = _client(app).post("/api/attendance/check-in", json=HQ)
    assert resp.status_code == 401


def test_admin_cannot_check_in(app, container):
    _seed_zone(container)
    resp = _client(app, user_id=1, role="admin").post("/api/attendance/check-in", json=HQ)
    assert resp.status_code == 403


def test_disabled_account_is_rejected(app, container):
    _seed_zone(container)
    resp = _client(app, user_id=2, role="staff", is_active=False).post("/api/attendance/check-in", json=HQ)
    assert resp.status_code == 403


def test_check_in_status_check_out_flow(app, container):
    _seed_zone(container)
    client = _client(app, user_id=2, role="staff")

    resp = client.post("/api/attendance/check-in", json={**HQ, "notes": "hello"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["record"]["status"] == "checked_in"
    assert body["record"]["notes"] == "hello"
    assert body["geofenceValidation"]["isValid"] is True

    status = client.get("/api/attendance/status").get_json()
    assert status["isCheckedIn"] is True
    assert status["activeRecord"]["id"] == body["record"]["id"]

    again = client.post("/api/attendance/check-in", json=HQ)
    assert again.status_code == 409
    assert again.get_json()["code"] == "AlreadyCheckedIn"

    out = client.post("/api/attendance/check-out", json={})
    assert out.status_code == 200
    out_body = out.get_json()
    assert out_body["record"]["status"] == "checked_out"
    assert out_body["record"]["totalHours"] is not None
    assert out_body["geofenceValidation"] is None

    history = client.get("/api/attendance/history?limit=5").get_json()["records"]
    assert len(history) == 1


def test_check_in_outside_zone_returns_distance(app, container):
    _seed_zone(container)
    resp = _client(app, user_id=2, role="staff").post(
        "/api/attendance/check-in", json={"latitude": 37.7759, "longitude": -122.4194}
    )

    assert resp.status_code == 403
    validation = resp.get_json()["geofenceValidation"]
    assert validation["isValid"] is False
    assert validation["allowedRadius"] == 100
    assert validation["geofenceName"] == "HQ"
    assert validation["distance"] == pytest.approx(111.19, abs=0.5)


def test_check_in_without_zone(app):
    resp = _client(app, user_id=2, role="staff").post("/api/attendance/check-in", json=HQ)
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "NoGeofenceConfigured"


def test_check_in_with_bad_coordinates(app, container):
    _seed_zone(container)
    resp = _client(app, user_id=2, role="staff").post(
        "/api/attendance/check-in", json={"latitude": 123, "longitude": 0}
    )
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "latitude"


def test_check_out_without_session(app, container):
    _seed_zone(container)
    resp = _client(app, user_id=2, role="staff").post("/api/attendance/check-out", json=HQ)
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "NoActiveSession"


def test_check_out_far_away_is_advisory(app, container):
    _seed_zone(container)
    client = _client(app, user_id=2, role="staff")
    client.post("/api/attendance/check-in", json=HQ)

    resp = client.post("/api/attendance/check-out", json={"latitude": 37.80, "longitude": -122.4194})

    assert resp.status_code == 200
    assert resp.get_json()["geofenceValidation"]["isValid"] is False


def test_history_rejects_bad_limit(app):
    resp = _client(app, user_id=2, role="staff").get("/api/attendance/history?limit=abc")
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "limit"


def test_admin_lists_all_records_with_filters(app, container):
    _seed_zone(container)
    _client(app, user_id=2, role="staff").post("/api/attendance/check-in", json=HQ)
    staff3 = _client(app, user_id=3, role="staff")
    staff3.post("/api/attendance/check-in", json=HQ)
    staff3.post("/api/attendance/check-out", json={})

    admin = _client(app, user_id=1, role="admin")
    everything = admin.get("/api/admin/attendance").get_json()["records"]
    open_only = admin.get("/api/admin/attendance?status=checked_in").get_json()["records"]
    user3 = admin.get("/api/admin/attendance?user_id=3").get_json()["records"]

    assert len(everything) == 2
    assert [r["userId"] for r in open_only] == [2]
    assert [r["status"] for r in user3] == ["checked_out"]

    assert admin.get("/api/admin/attendance?status=bogus").status_code == 400
    assert admin.get("/api/admin/attendance?start=yesterday").status_code == 400
    assert _client(app, user_id=2, role="staff").get("/api/admin/attendance").status_code == 403


def test_admin_manages_zones(app):
    admin = _client(app, user_id=1, role="admin")

    created = admin.post(
        "/api/admin/geofence",
        json={"name": "HQ", "address": "1 Market St", "radius": 250, **HQ},
    )
    assert created.status_code == 201
    zone = created.get_json()["geofenceSettings"]
    assert zone["radius"] == 250
    assert zone["isActive"] is True

    updated = admin.put(f"/api/admin/geofence/{zone['id']}", json={"isActive": False})
    assert updated.status_code == 200
    assert updated.get_json()["geofenceSettings"]["isActive"] is False

    staff = _client(app, user_id=2, role="staff")
    assert staff.get("/api/geofence").get_json()["geofenceSettings"] == []
    assert len(admin.get("/api/admin/geofence").get_json()["geofenceSettings"]) == 1


def test_zone_validation_errors(app):
    admin = _client(app, user_id=1, role="admin")

    resp = admin.post(
        "/api/admin/geofence",
        json={"name": "HQ", "address": "x", "radius": 20_000, **HQ},
    )
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "radius"

    missing = admin.put("/api/admin/geofence/999", json={"name": "Nope"})
    assert missing.status_code == 400


def test_staff_cannot_create_zone(app):
    resp = _client(app, user_id=2, role="staff").post(
        "/api/admin/geofence", json={"name": "HQ", "address": "x", **HQ}
    )
    assert resp.status_code == 403


def test_check_in_with_non_string_notes(app, container):
    _seed_zone(container)
    client = _client(app, user_id=2, role="staff")

    resp = client.post("/api/attendance/check-in", json={**HQ, "notes": 123})

    assert resp.status_code == 400
    assert resp.get_json()["field"] == "notes"
    assert client.get("/api/attendance/status").get_json()["isCheckedIn"] is False


@pytest.mark.parametrize("notes", [123, ["a"]])
def test_check_out_with_non_string_notes_keeps_session_open(app, container, notes):
    _seed_zone(container)
    client = _client(app, user_id=2, role="staff")
    client.post("/api/attendance/check-in", json=HQ)

    resp = client.post("/api/attendance/check-out", json={"notes": notes})

    assert resp.status_code == 400
    assert resp.get_json()["field"] == "notes"
    assert client.get("/api/attendance/status").get_json()["isCheckedIn"] is True


def test_check_out_with_only_latitude_closes_session(app, container):
    _seed_zone(container)
    client = _client(app, user_id=2, role="staff")
    client.post("/api/attendance/check-in", json=HQ)

    resp = client.post("/api/attendance/check-out", json={"latitude": HQ["latitude"]})

    assert resp.status_code == 200
    assert resp.get_json()["record"]["status"] == "checked_out"
    assert resp.get_json()["geofenceValidation"] is None


@pytest.mark.parametrize(
    "bounds,expected",
    [
        ({"start": "2026-01-01T00:00:00+00:00"}, 1),
        ({"start": "2026-01-01T13:00:00+02:00"}, 1),
        ({"start": "2026-01-01T08:00:00-05:00"}, 0),
        ({"end": "2026-01-01T19:00:00+07:00"}, 1),
        ({"end": "2026-01-01T06:00:00-05:00"}, 0),
    ],
)
def test_admin_filter_accepts_timezone_aware_bounds(app, container, bounds, expected):
    _seed_zone(container)
    container.attendance_manager.check_in(2, HQ["latitude"], HQ["longitude"], now=datetime(2026, 1, 1, 12, 0, 0))

    resp = _client(app, user_id=1, role="admin").get("/api/admin/attendance", query_string=bounds)

    assert resp.status_code == 200
    assert len(resp.get_json()["records"]) == expected
