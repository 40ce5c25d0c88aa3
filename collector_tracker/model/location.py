"""Coordinate and Location - the geometry atoms of the tracker.

A Coordinate is a bare (lat, lon) pair. A Location adds the instant it was
recorded and an optional free-text address. Locations are immutable once
recorded.

Coordinates are deliberately NOT range-checked on construction: the roster
comes from an external backend and a bad point must reach the map layer,
which skips it instead of failing the whole render.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from math import isfinite
from typing import Any


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 coordinate in decimal degrees.

    Attributes:
        latitude: Latitude, valid range [-90, 90]
        longitude: Longitude, valid range [-180, 180]
    """

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        """True if both components are finite and within range."""
        return is_valid_coordinate(lat=self.latitude, lon=self.longitude)

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.latitude, self.longitude)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON/Pydeck order."""
        return (self.longitude, self.latitude)

    def __repr__(self) -> str:
        return f"Coordinate(lat={self.latitude:.5f}, lon={self.longitude:.5f})"


def is_valid_coordinate(lat: Any, lon: Any) -> bool:
    """Check that lat/lon are finite numbers within WGS84 ranges."""
    if isinstance(lat, bool) or isinstance(lon, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False
    if not (isfinite(lat) and isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) as an aware datetime.

    Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        # fromisoformat on older interpreters rejects the "Z" suffix
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Location:
    """A recorded position: coordinate + instant + optional address.

    Attributes:
        coordinate: Where the point was recorded
        timestamp: When it was recorded (timezone-aware)
        address: Optional human-readable label

    Example:
        loc = Location(
            coordinate=Coordinate(latitude=23.034, longitude=72.556),
            timestamp=datetime.now(timezone.utc),
            address="C.G. Road, Navrangpura",
        )
    """

    coordinate: Coordinate
    timestamp: datetime
    address: str | None = None

    @property
    def lat(self) -> float:
        """Latitude delegated from coordinate."""
        return self.coordinate.latitude

    @property
    def lon(self) -> float:
        """Longitude delegated from coordinate."""
        return self.coordinate.longitude

    @property
    def is_valid(self) -> bool:
        return self.coordinate.is_valid

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON/Pydeck order."""
        return self.coordinate.lon_lat

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        """Create Location from a roster record ({lat, lng|lon, timestamp, address?})."""
        lon = data["lng"] if "lng" in data else data["lon"]
        return cls(
            coordinate=Coordinate(latitude=_as_float(data["lat"]), longitude=_as_float(lon)),
            timestamp=parse_timestamp(data["timestamp"]),
            address=data.get("address"),
        )


def _as_float(value: Any) -> float:
    """Convert numeric roster values to float, mapping unusable values to NaN."""
    if value is None:
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")
