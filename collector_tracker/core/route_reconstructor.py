"""RouteReconstructor - rebuilds a collector's travel route from its history.

The route polyline is the history positions in chronological order followed
by the current location. Nothing is reordered or deduplicated: revisiting a
place yields a repeated waypoint.

An empty history yields no route at all (not a single-point line). A history
of one entry yields a two-point route so a line can still be drawn.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from collector_tracker.constants import WAYPOINT_ROLES
from collector_tracker.core.geo_calculator import GeoCalculator
from collector_tracker.core.marker_factory import waypoint_role
from collector_tracker.model.client import Client
from collector_tracker.model.collector import Collector
from collector_tracker.model.location import Location

logger = logging.getLogger(__name__)


class WaypointRole(Enum):
    """Role of a point along a reconstructed route."""

    START = "start"
    STOP = "stop"
    CLIENT_VISIT = "client_visit"
    CURRENT = "current"


assert [r.value for r in WaypointRole] == WAYPOINT_ROLES


@dataclass(frozen=True)
class Waypoint:
    """One annotated point along a route.

    Attributes:
        index: 0-based position in the route (the current endpoint is last)
        location: Recorded location
        role: START, STOP, CLIENT_VISIT or CURRENT
        duration_minutes: Dwell time at this point (0 for the current endpoint)
        client_visited: Client visited here, if any
    """

    index: int
    location: Location
    role: WaypointRole
    duration_minutes: float = 0.0
    client_visited: Client | None = None

    @property
    def is_start(self) -> bool:
        return self.role is WaypointRole.START

    @property
    def is_current(self) -> bool:
        return self.role is WaypointRole.CURRENT

    @property
    def has_client_visit(self) -> bool:
        return self.client_visited is not None


@dataclass
class ReconstructedRoute:
    """Ordered route of a single collector.

    Attributes:
        collector_id: Owner of the route
        points: Polyline as Locations (history..., current)
        waypoints: One annotated waypoint per point, same order
    """

    collector_id: str
    points: list[Location] = field(default_factory=list)
    waypoints: list[Waypoint] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def start(self) -> Waypoint:
        return self.waypoints[0]

    @property
    def current(self) -> Waypoint:
        return self.waypoints[-1]

    @property
    def path_lon_lat(self) -> list[list[float]]:
        """Polyline in pydeck [lon, lat] order, invalid points omitted."""
        return [list(p.lon_lat) for p in self.points if p.is_valid]

    @property
    def total_distance_m(self) -> float:
        """Great-circle length of the route over its valid points."""
        latlons = [(p.lat, p.lon) for p in self.points if p.is_valid]
        return GeoCalculator.path_length_m(latlons)

    @property
    def total_dwell_minutes(self) -> float:
        return sum(w.duration_minutes for w in self.waypoints)

    @property
    def client_visit_count(self) -> int:
        return sum(1 for w in self.waypoints if w.has_client_visit)


def reconstruct_route(collector: Collector) -> ReconstructedRoute | None:
    """Build the route polyline and waypoints for a collector.

    Args:
        collector: Collector whose history and current location to use

    Returns:
        ReconstructedRoute with len(history) + 1 points, or None if the
        collector has no history.
    """
    history = collector.location_history
    if not history:
        logger.debug(f"[ROUTE] {collector.id} has no history, no route")
        return None

    route = ReconstructedRoute(collector_id=collector.id)
    for i, entry in enumerate(history):
        role = WaypointRole(waypoint_role(is_start=i == 0, has_client_visit=entry.has_client_visit))
        route.points.append(entry.location)
        route.waypoints.append(
            Waypoint(
                index=i,
                location=entry.location,
                role=role,
                duration_minutes=entry.duration_minutes,
                client_visited=entry.client_visited,
            )
        )

    route.points.append(collector.current_location)
    route.waypoints.append(
        Waypoint(
            index=len(history),
            location=collector.current_location,
            role=WaypointRole.CURRENT,
        )
    )

    invalid = sum(1 for p in route.points if not p.is_valid)
    if invalid:
        logger.warning(f"[ROUTE] {collector.id}: {invalid} of {route.point_count} points have invalid coordinates")

    logger.debug(f"[ROUTE] {collector.id}: {route.point_count} points, {route.client_visit_count} client visits")
    return route
