# utils/geofence.py

from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_METERS = 6_371_000


@dataclass(frozen=True)
class DistanceCheck:
    distance_meters: float
    radius_meters: float
    is_within_radius: bool

    @property
    def distance_friendly(self) -> str:
        return format_distance(self.distance_meters)


def validate_coordinates(lat: float, lng: float) -> None:
    if not -90 <= lat <= 90:
        raise ValueError(f"Latitude {lat} is outside [-90, 90]")
    if not -180 <= lng <= 180:
        raise ValueError(f"Longitude {lng} is outside [-180, 180]")


def haversine_dist(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters on a spherical Earth."""
    φ1, φ2 = radians(lat1), radians(lat2)
    Δφ = radians(lat2 - lat1)
    Δλ = radians(lng2 - lng1)

    a = sin(Δφ / 2) ** 2 + cos(φ1) * cos(φ2) * sin(Δλ / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def validate_location(
    lat: float,
    lng: float,
    center_lat: float,
    center_lng: float,
    radius_m: float,
) -> DistanceCheck:
    distance = haversine_dist(lat, lng, center_lat, center_lng)
    return DistanceCheck(
        distance_meters=distance,
        radius_meters=radius_m,
        is_within_radius=distance <= radius_m,
    )


def format_distance(meters: float) -> str:
    """'15m' below a kilometer, '1.2km' above."""
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"
