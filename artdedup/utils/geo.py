"""Geographic helpers for similarity scoring."""

import math

from artdedup.models.similarity import Coordinates

EARTH_RADIUS_METERS = 6371000.0

VALID_LATITUDE_RANGE = (-90.0, 90.0)
VALID_LONGITUDE_RANGE = (-180.0, 180.0)


def calculate_distance(point1: Coordinates, point2: Coordinates) -> float:
    """Great-circle distance between two points using the haversine formula.

    Args:
        point1: First coordinate pair.
        point2: Second coordinate pair.

    Returns:
        Distance in meters. Identical points return 0.0.
    """
    d_lat = math.radians(point2.lat - point1.lat)
    d_lon = math.radians(point2.lon - point1.lon)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(point1.lat))
        * math.cos(math.radians(point2.lat))
        * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push antipodal inputs a hair past 1.0
    a = min(1.0, max(0.0, a))

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def is_valid_latitude(lat: float) -> bool:
    return math.isfinite(lat) and VALID_LATITUDE_RANGE[0] <= lat <= VALID_LATITUDE_RANGE[1]


def is_valid_longitude(lon: float) -> bool:
    return (
        math.isfinite(lon) and VALID_LONGITUDE_RANGE[0] <= lon <= VALID_LONGITUDE_RANGE[1]
    )


def is_valid_coordinates(coordinates: Coordinates) -> bool:
    """Validate a coordinate pair before it reaches the scorer."""
    return is_valid_latitude(coordinates.lat) and is_valid_longitude(coordinates.lon)
