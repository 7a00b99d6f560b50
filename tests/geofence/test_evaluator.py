from __future__ import annotations

import pytest

from geo_attendance.geofence.evaluator import distance_meters, evaluate, evaluate_against_nearest
from geo_attendance.geofence.model import GeofenceZone

POINTS = [
    (0.0, 0.0),
    (37.7749, -122.4194),
    (-33.8688, 151.2093),
    (89.9, 179.9),
    (-90.0, -180.0),
]


def _zone(zone_id: int, lat: float, lon: float, radius: float = 100, name: str | None = None) -> GeofenceZone:
    return GeofenceZone(
        zone_id=zone_id,
        name=name or f"Zone {zone_id}",
        address="-",
        latitude=lat,
        longitude=lon,
        radius=radius,
    )


@pytest.mark.parametrize("lat,lon", POINTS)
def test_distance_to_self_is_zero(lat, lon):
    assert distance_meters(lat, lon, lat, lon) == 0


def test_distance_is_symmetric():
    for a in POINTS:
        for b in POINTS:
            assert distance_meters(*a, *b) == pytest.approx(distance_meters(*b, *a))


def test_distance_grows_with_separation():
    offsets = [0.0001, 0.001, 0.01, 0.1, 1.0]
    distances = [distance_meters(37.7749, -122.4194, 37.7749 + d, -122.4194) for d in offsets]
    assert distances == sorted(distances)
    assert len(set(distances)) == len(distances)


def test_one_thousandth_degree_latitude_is_about_111_meters():
    d = distance_meters(37.7749, -122.4194, 37.7759, -122.4194)
    assert d == pytest.approx(111.19, abs=0.5)


def test_point_exactly_on_boundary_is_inside():
    center = (37.7749, -122.4194)
    point = (37.7753, -122.4190)
    radius = distance_meters(*point, *center)

    result = evaluate(*point, _zone(1, *center, radius=radius))

    assert result.is_inside is True
    assert result.allowed_radius == radius


def test_point_beyond_radius_is_outside():
    result = evaluate(37.7759, -122.4194, _zone(1, 37.7749, -122.4194, radius=100))

    assert result.is_inside is False
    assert result.distance_meters == pytest.approx(111.19, abs=0.5)
    assert result.allowed_radius == 100


def test_nearest_returns_none_without_zones():
    assert evaluate_against_nearest(37.7749, -122.4194, []) is None


def test_nearest_picks_closest_zone():
    far = _zone(1, 37.80, -122.40, radius=5000, name="Far")
    near = _zone(2, 37.7750, -122.4194, radius=50, name="Near")

    result = evaluate_against_nearest(37.7749, -122.4194, [far, near])

    assert result is not None
    assert result.zone.name == "Near"
    assert result.is_inside is True


def test_nearest_is_not_the_most_permissive_zone():
    # Inside the big far zone's radius, but validated against the closer small one.
    big = _zone(1, 37.7800, -122.4194, radius=10_000, name="Campus")
    small = _zone(2, 37.7749, -122.4194, radius=10, name="Lobby")

    result = evaluate_against_nearest(37.7751, -122.4194, [big, small])

    assert result.zone.name == "Lobby"
    assert result.is_inside is False


def test_nearest_tie_goes_to_first_zone():
    a = _zone(1, 10.0, 10.0, name="A")
    b = _zone(2, 10.0, 10.0, name="B")

    assert evaluate_against_nearest(10.0, 10.0, [a, b]).zone.name == "A"
    assert evaluate_against_nearest(10.0, 10.0, [b, a]).zone.name == "B"


def test_evaluation_payload():
    result = evaluate(37.7749, -122.4194, _zone(3, 37.7749, -122.4194, name="HQ"))

    assert result.to_dict() == {
        "isValid": True,
        "distance": 0.0,
        "allowedRadius": 100,
        "geofenceName": "HQ",
        "geofenceId": 3,
    }
