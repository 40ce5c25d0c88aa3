"""Geodesic and Web Mercator calculations.

Provides geographic helper functions for the tracker map:
- Distance calculation (Haversine formula)
- Path length along an ordered sequence of points
- Web Mercator projection helpers used for viewport fitting

All distance calculations use a spherical Earth approximation (R = 6,371 km).
"""

from math import atan, atan2, cos, degrees, exp, log, pi, radians, sin, sqrt, tan
from typing import Sequence

from collector_tracker.constants import MapConfig

# Earth's radius in meters (WGS84 spherical approximation)
EARTH_RADIUS_M = 6_371_000


class GeoCalculator:
    """Static methods for geodesic and projection calculations.

    Coordinates are in decimal degrees (WGS84).
    Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def path_length_m(latlons: Sequence[tuple[float, float]]) -> float:
        """Total length of a polyline given as (lat, lon) pairs.

        Returns 0 for fewer than two points.
        """
        total = 0.0
        for (lat1, lon1), (lat2, lon2) in zip(latlons, latlons[1:]):
            total += GeoCalculator.haversine_distance_m(lat1=lat1, lon1=lon1, lat2=lat2, lon2=lon2)
        return total

    @staticmethod
    def clamp_mercator_lat(lat: float) -> float:
        """Clamp latitude to the range Web Mercator can project."""
        return max(-MapConfig.MAX_MERCATOR_LAT, min(MapConfig.MAX_MERCATOR_LAT, lat))

    @staticmethod
    def mercator_y(lat: float) -> float:
        """Project latitude to Web Mercator y in radians (unbounded, ~[-pi, pi])."""
        lat_rad = radians(GeoCalculator.clamp_mercator_lat(lat))
        return log(tan(pi / 4 + lat_rad / 2))

    @staticmethod
    def inverse_mercator_y(y: float) -> float:
        """Inverse of mercator_y - returns latitude in degrees."""
        return degrees(2 * atan(exp(y)) - pi / 2)
