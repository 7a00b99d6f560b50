from __future__ import annotations

import pytest

from geo_attendance.core.enums import Role
from geo_attendance.core.exceptions import AuthorizationError, InvalidCoordinates, ValidationError
from geo_attendance.geofence.memory_geofence_repository import MemoryGeofenceRepository
from geo_attendance.geofence.registry import GeofenceRegistry
from geo_attendance.geofence.service import GeofenceService


def _service(cache_seconds: float = 0):
    repo = MemoryGeofenceRepository()
    registry = GeofenceRegistry(repo, cache_seconds=cache_seconds, clock=lambda: 0.0)
    return GeofenceService(repo, registry), repo


def _create(svc: GeofenceService, **overrides):
    fields = dict(name="HQ", address="1 Market St", latitude=37.7749, longitude=-122.4194)
    fields.update(overrides)
    return svc.upsert_zone(current_role=Role.ADMIN, **fields)


def test_admin_creates_zone_with_defaults():
    svc, _ = _service()

    zone = _create(svc)

    assert zone.zone_id == 1
    assert zone.radius == 100
    assert zone.is_active is True
    assert [z.zone_id for z in svc.list_active()] == [1]


def test_staff_cannot_manage_zones():
    svc, repo = _service()

    with pytest.raises(AuthorizationError):
        svc.upsert_zone(current_role=Role.STAFF, name="HQ", address="x", latitude=0, longitude=0)
    with pytest.raises(AuthorizationError):
        svc.list_zones(current_role=Role.STAFF)
    assert repo.list_all() == []


@pytest.mark.parametrize("radius", [0, -5, 10_001, "abc", None])
def test_invalid_radius_is_rejected_with_field(radius):
    svc, repo = _service()

    with pytest.raises(ValidationError) as exc:
        _create(svc, radius=radius)

    assert exc.value.field == "radius"
    assert repo.list_all() == []


def test_max_radius_is_allowed():
    svc, _ = _service()
    assert _create(svc, radius=10_000).radius == 10_000


@pytest.mark.parametrize(
    "lat,lon,field",
    [(91, 0, "latitude"), (-90.5, 0, "latitude"), (0, 180.1, "longitude"), (0, -181, "longitude")],
)
def test_invalid_center_is_rejected(lat, lon, field):
    svc, _ = _service()

    with pytest.raises(InvalidCoordinates) as exc:
        _create(svc, latitude=lat, longitude=lon)

    assert exc.value.field == field


@pytest.mark.parametrize("field", ["name", "address"])
def test_blank_text_fields_are_rejected(field):
    svc, _ = _service()

    with pytest.raises(ValidationError) as exc:
        _create(svc, **{field: "   "})

    assert exc.value.field == field


def test_partial_update_keeps_other_fields():
    svc, _ = _service()
    created = _create(svc, radius=150)

    updated = svc.upsert_zone(current_role=Role.ADMIN, zone_id=created.zone_id, name="Head Office")

    assert updated.name == "Head Office"
    assert updated.radius == 150
    assert updated.latitude == created.latitude
    assert updated.address == created.address


def test_deactivation_is_visible_through_cached_registry():
    svc, _ = _service(cache_seconds=3600)
    created = _create(svc)
    assert len(svc.list_active()) == 1

    svc.upsert_zone(current_role=Role.ADMIN, zone_id=created.zone_id, is_active=False)

    assert svc.list_active() == []
    assert len(svc.list_zones(current_role=Role.ADMIN)) == 1


def test_is_active_accepts_form_strings():
    svc, _ = _service()
    created = _create(svc, is_active="false")
    assert created.is_active is False

    with pytest.raises(ValidationError) as exc:
        svc.upsert_zone(current_role=Role.ADMIN, zone_id=created.zone_id, is_active="maybe")
    assert exc.value.field == "isActive"


def test_update_unknown_zone_fails():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.upsert_zone(current_role=Role.ADMIN, zone_id=99, name="Nope")


def test_update_checks_coordinates_against_stored_pair():
    svc, _ = _service()
    created = _create(svc)

    moved = svc.upsert_zone(current_role=Role.ADMIN, zone_id=created.zone_id, latitude=10.5)
    assert (moved.latitude, moved.longitude) == (10.5, created.longitude)

    with pytest.raises(InvalidCoordinates):
        svc.upsert_zone(current_role=Role.ADMIN, zone_id=created.zone_id, longitude=200)
