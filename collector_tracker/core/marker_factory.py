"""MarkerFactory - visual descriptors for map markers.

Pure functions of their inputs: the same status (or waypoint role) always
yields an equal MarkerStyle. The map surface turns these descriptors into
deck.gl layer data; nothing here touches pydeck.

Families:
- Collector marker: circle colored by status, pulsing halo only when active
- Client marker: fixed cyan rounded square
- Waypoint marker: start / stop / client visit, plus the current-location endpoint
"""

from dataclasses import dataclass

from collector_tracker.constants import MarkerConfig, StyleConfig
from collector_tracker.model.collector import CollectorStatus

SHAPE_CIRCLE = "circle"
SHAPE_ROUNDED_SQUARE = "rounded_square"


def hex_to_rgba(hex_color: str, alpha: int = 255) -> list[int]:
    """Convert "#rrggbb" to a deck.gl [R, G, B, A] list (0-255)."""
    hex_color = hex_color.lstrip("#")
    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)
    return [r, g, b, alpha]


@dataclass(frozen=True)
class MarkerStyle:
    """Visual descriptor for one marker.

    Attributes:
        color: Fill color as hex string
        size_px: Glyph size in pixels
        anchor: [x, y] pixel offset of the geographic point within the glyph
        popup_anchor: [x, y] pixel offset of the popup relative to the anchor
        shape: SHAPE_CIRCLE or SHAPE_ROUNDED_SQUARE
        pulse: True if a pulsing halo is drawn around the glyph
        label: Short text drawn in or next to the glyph (e.g., waypoint number)
    """

    color: str
    size_px: int
    anchor: tuple[int, int]
    popup_anchor: tuple[int, int]
    shape: str = SHAPE_CIRCLE
    pulse: bool = False
    label: str = ""

    @property
    def rgba(self) -> list[int]:
        return hex_to_rgba(hex_color=self.color)

    @property
    def radius_px(self) -> float:
        return self.size_px / 2


def collector_marker(status: CollectorStatus | str) -> MarkerStyle:
    """Marker for a collector, keyed by status.

    Unknown status values fall back to the idle style instead of raising.
    """
    if not isinstance(status, CollectorStatus):
        status = CollectorStatus.parse(status)

    return MarkerStyle(
        color=StyleConfig.STATUS_COLORS[status.value],
        size_px=MarkerConfig.COLLECTOR_SIZE_PX,
        anchor=MarkerConfig.COLLECTOR_ANCHOR,
        popup_anchor=MarkerConfig.COLLECTOR_POPUP_ANCHOR,
        shape=SHAPE_CIRCLE,
        pulse=status is CollectorStatus.ACTIVE,
    )


def client_marker() -> MarkerStyle:
    """Single fixed style for a client's place of business."""
    return MarkerStyle(
        color=StyleConfig.CLIENT_COLOR,
        size_px=MarkerConfig.CLIENT_SIZE_PX,
        anchor=MarkerConfig.CLIENT_ANCHOR,
        popup_anchor=MarkerConfig.CLIENT_POPUP_ANCHOR,
        shape=SHAPE_ROUNDED_SQUARE,
    )


def waypoint_role(is_start: bool, has_client_visit: bool) -> str:
    """Resolve a history waypoint's role. Start wins over client visit, which wins over stop."""
    if is_start:
        return "start"
    if has_client_visit:
        return "client_visit"
    return "stop"


def waypoint_marker(index: int, is_start: bool, has_client_visit: bool) -> MarkerStyle:
    """Marker for a history waypoint along a route.

    Args:
        index: 0-based position in the history
        is_start: True for the first history entry
        has_client_visit: True if a client was visited at this point

    Returns:
        MarkerStyle labelled with the 1-based stop number.
    """
    role = waypoint_role(is_start=is_start, has_client_visit=has_client_visit)
    return MarkerStyle(
        color=StyleConfig.WAYPOINT_COLORS[role],
        size_px=MarkerConfig.WAYPOINT_SIZE_PX,
        anchor=MarkerConfig.WAYPOINT_ANCHOR,
        popup_anchor=MarkerConfig.WAYPOINT_POPUP_ANCHOR,
        shape=SHAPE_CIRCLE,
        label=str(index + 1),
    )


def current_location_marker() -> MarkerStyle:
    """Terminal marker for the live endpoint appended after history."""
    return MarkerStyle(
        color=StyleConfig.WAYPOINT_COLORS["current"],
        size_px=MarkerConfig.CURRENT_SIZE_PX,
        anchor=MarkerConfig.CURRENT_ANCHOR,
        popup_anchor=MarkerConfig.WAYPOINT_POPUP_ANCHOR,
        shape=SHAPE_CIRCLE,
    )
