"""Geographic bounding rectangle for viewport fits.

compute_bounds() returns the minimal rectangle enclosing a set of
coordinates, or None when there is nothing to enclose. Callers must treat
None as "no bounds" and skip the camera fit.

Padding is a viewport concern (pixels) and is never stored here.
"""

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from collector_tracker.model.location import Coordinate


@dataclass(frozen=True)
class GeoBounds:
    """Axis-aligned lat/lon rectangle. Invariant: min <= max on both axes."""

    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    def __post_init__(self) -> None:
        if self.min_lat > self.max_lat or self.min_lon > self.max_lon:
            raise ValueError(f"Inverted bounds: {self}")

    @property
    def south_west(self) -> tuple[float, float]:
        """(lat, lon) of the south-west corner."""
        return (self.min_lat, self.min_lon)

    @property
    def north_east(self) -> tuple[float, float]:
        """(lat, lon) of the north-east corner."""
        return (self.max_lat, self.max_lon)

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def is_point(self) -> bool:
        """True if all enclosed coordinates coincide."""
        return self.lat_span == 0 and self.lon_span == 0

    def contains(self, coordinate: Coordinate) -> bool:
        return (
            self.min_lat <= coordinate.latitude <= self.max_lat
            and self.min_lon <= coordinate.longitude <= self.max_lon
        )


def compute_bounds(coordinates: Iterable[Coordinate]) -> GeoBounds | None:
    """Compute the minimal rectangle enclosing all valid coordinates.

    Invalid coordinates (NaN or out of range) are skipped.

    Args:
        coordinates: Points to enclose

    Returns:
        GeoBounds, or None if no valid coordinate was given.
    """
    valid = [c.lat_lon for c in coordinates if c.is_valid]
    if not valid:
        return None

    arr = np.asarray(valid, dtype=float)
    lats = arr[:, 0]
    lons = arr[:, 1]
    return GeoBounds(
        min_lat=float(lats.min()),
        min_lon=float(lons.min()),
        max_lat=float(lats.max()),
        max_lon=float(lons.max()),
    )
