#!/usr/bin/env python3
"""
Tests for the Haversine distance validator used by clock-in/out.
"""
import pytest

from utils.geofence import (
    EARTH_RADIUS_METERS,
    format_distance,
    haversine_dist,
    validate_coordinates,
    validate_location,
)

HOSPITAL = (12.9716, 77.5946)


def test_coincident_points_are_zero_apart():
    for lat, lng in [(0.0, 0.0), HOSPITAL, (-33.8688, 151.2093), (89.9, -179.9)]:
        assert haversine_dist(lat, lng, lat, lng) == 0.0


def test_distance_is_symmetric():
    pairs = [
        ((12.9716, 77.5946), (12.9352, 77.6245)),
        ((40.7589, -73.9441), (34.0522, -118.3756)),
        ((-45.0, 170.0), (45.0, -170.0)),
    ]
    for (lat1, lng1), (lat2, lng2) in pairs:
        assert haversine_dist(lat1, lng1, lat2, lng2) == pytest.approx(
            haversine_dist(lat2, lng2, lat1, lng1)
        )


def test_one_degree_of_longitude_at_equator():
    assert haversine_dist(0, 0, 0, 1) == pytest.approx(111_195, rel=0.01)


def test_earth_radius_constant():
    assert EARTH_RADIUS_METERS == 6_371_000


def test_radius_boundary_is_inclusive():
    point = (12.9730, 77.5950)
    distance = haversine_dist(*point, *HOSPITAL)

    assert validate_location(*point, *HOSPITAL, distance).is_within_radius
    assert not validate_location(*point, *HOSPITAL, distance - 0.01).is_within_radius


def test_validate_location_reports_distance_and_radius():
    # ~500m north of the hospital
    check = validate_location(HOSPITAL[0] + 500 / 111_195, HOSPITAL[1], *HOSPITAL, 200)

    assert not check.is_within_radius
    assert check.radius_meters == 200
    assert check.distance_meters == pytest.approx(500, rel=0.01)
    assert check.distance_friendly == "500m"


def test_format_distance():
    assert format_distance(15.4) == "15m"
    assert format_distance(999) == "999m"
    assert format_distance(1200) == "1.2km"


def test_validate_coordinates_rejects_out_of_range():
    validate_coordinates(90, 180)
    validate_coordinates(-90, -180)
    with pytest.raises(ValueError):
        validate_coordinates(90.1, 0)
    with pytest.raises(ValueError):
        validate_coordinates(0, -180.5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
