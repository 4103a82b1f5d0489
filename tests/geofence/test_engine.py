import math

import pytest

from attendance_tracker.core.constants import EARTH_RADIUS_METERS
from attendance_tracker.geofence.engine import GeofenceEngine, haversine_distance
from attendance_tracker.geofence.model import GeofenceRegion, GeoPoint

CENTER = GeoPoint(28.7041, 77.1025)


def _region(region_id: str, center: GeoPoint, radius: float) -> GeofenceRegion:
    return GeofenceRegion(region_id=region_id, name=f"Site {region_id}", center=center, radius_meters=radius)


def test_point_on_center_is_within(office):
    engine = GeofenceEngine()

    assert engine.distance(CENTER, office.center) == 0
    assert engine.is_within(CENTER, office) is True


def test_point_111m_north_is_within_200m(office):
    engine = GeofenceEngine()
    north = GeoPoint(28.7051, 77.1025)

    assert engine.distance(north, office.center) == pytest.approx(111.19, abs=0.5)
    assert engine.is_within(north, office) is True


def test_point_outside_radius():
    engine = GeofenceEngine()
    region = _region("g", CENTER, 100)

    assert engine.is_within(GeoPoint(28.7051, 77.1025), region) is False


@pytest.mark.parametrize(
    "a, b",
    [
        (GeoPoint(28.7041, 77.1025), GeoPoint(19.0760, 72.8777)),
        (GeoPoint(-33.8688, 151.2093), GeoPoint(51.5074, -0.1278)),
        (GeoPoint(0.0, 179.9), GeoPoint(0.0, -179.9)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a), abs=1e-9)


@pytest.mark.parametrize("p", [GeoPoint(0, 0), GeoPoint(89.9, -45), GeoPoint(-12.5, 130.25)])
def test_distance_to_self_is_zero(p):
    assert haversine_distance(p, p) == 0
    assert GeofenceEngine().is_within(p, _region("g", p, 0.5))


def test_antipodal_points_are_half_circumference_apart():
    d = haversine_distance(GeoPoint(0, 0), GeoPoint(0, 180))

    assert d == pytest.approx(math.pi * EARTH_RADIUS_METERS)


def test_larger_radius_keeps_membership():
    engine = GeofenceEngine()
    point = GeoPoint(28.7060, 77.1040)
    radius = engine.distance(point, CENTER) + 1

    for r in (radius, radius * 2, radius + 1000):
        assert engine.is_within(point, _region("g", CENTER, r))


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_coordinates_never_match(office, bad):
    engine = GeofenceEngine()
    point = GeoPoint(bad, 77.1025)

    assert math.isnan(engine.distance(point, office.center))
    assert engine.is_within(point, office) is False
    assert engine.any_within(point, [office]) is False


@pytest.mark.parametrize("radius", [0, -5, math.nan])
def test_non_positive_radius_never_matches(radius):
    assert GeofenceEngine().is_within(CENTER, _region("g", CENTER, radius)) is False


def test_any_within_empty_regions_is_false():
    assert GeofenceEngine().any_within(CENTER, []) is False


def test_any_within_matches_second_region():
    far = _region("far", GeoPoint(19.0760, 72.8777), 200)
    near = _region("near", CENTER, 50)

    assert GeofenceEngine().any_within(CENTER, [far, near]) is True


def test_nearest_region_empty_is_none():
    assert GeofenceEngine().nearest_region(CENTER, []) is None


def test_nearest_region_picks_minimum_distance():
    far = _region("far", GeoPoint(19.0760, 72.8777), 200)
    near = _region("near", GeoPoint(28.7100, 77.1025), 200)

    nearest = GeofenceEngine().nearest_region(CENTER, [far, near])

    assert nearest.region is near
    assert nearest.distance_meters == pytest.approx(656, abs=2)


def test_nearest_region_tie_keeps_first():
    first = _region("a", CENTER, 10)
    second = _region("b", CENTER, 500)

    assert GeofenceEngine().nearest_region(CENTER, [first, second]).region is first


def test_nearest_region_prefers_finite_distance_over_nan():
    broken = _region("broken", GeoPoint(math.nan, 0), 100)
    good = _region("good", GeoPoint(28.8, 77.1), 100)

    assert GeofenceEngine().nearest_region(CENTER, [broken, good]).region is good


def test_regions_containing_keeps_input_order():
    big = _region("big", CENTER, 5000)
    small = _region("small", CENTER, 10)
    elsewhere = _region("elsewhere", GeoPoint(0, 0), 10)

    assert GeofenceEngine().regions_containing(CENTER, [big, elsewhere, small]) == [big, small]
