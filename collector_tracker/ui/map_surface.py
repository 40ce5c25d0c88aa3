"""MapSurfaceController - owns the tracker map and its overlays.

Renders collectors, clients and the selected collector's route on a pydeck map:
- Satellite basemap with a semi-transparent label overlay (persistent)
- Collector markers colored by status, with a halo for active collectors
- Client markers for every collector's current task
- Route history: shadow line, primary line, dashed direction overlay
- Waypoint markers numbered along the route

Lifecycle is Uninitialized -> Ready -> Disposed (see MapLifecycle). Only a
Ready surface reconciles; before mount and after dispose reconcile() is a
logged no-op. dispose() releases every overlay record and the basemap style.

reconcile() always starts from a cleared overlay set, so calling it twice with
the same input yields the same overlays. The controller only reads the roster
and the selection; both are owned by the host view.

Key conventions:
- Uses [lon, lat] coordinate order (GeoJSON/deck.gl standard)
- Colors as RGBA lists [R, G, B, A] (0-255)
- Layer data prepared as list[dict]; every pickable record carries
  "type", "id" and "popup_html"
"""

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Sequence

import pydeck as pdk

from collector_tracker.constants import (
    ClickConfig,
    MarkerConfig,
    RouteConfig,
    StyleConfig,
)
from collector_tracker.core.formatting import format_distance_m
from collector_tracker.core.marker_factory import (
    SHAPE_ROUNDED_SQUARE,
    MarkerStyle,
    client_marker,
    collector_marker,
    current_location_marker,
    hex_to_rgba,
    waypoint_marker,
)
from collector_tracker.core.route_reconstructor import ReconstructedRoute, WaypointRole, reconstruct_route
from collector_tracker.model.collector import Collector
from collector_tracker.ui.basemap import build_basemap_style
from collector_tracker.ui.popup_content import client_popup, collector_popup, waypoint_popup
from collector_tracker.ui.state_machine import MapLifecycle

logger = logging.getLogger(__name__)


def _svg_icon(style: MarkerStyle, size_px: int, fill: str, fill_opacity: float = 1.0, border: bool = True) -> str:
    """Render a marker glyph as an SVG data URL for IconLayer."""
    border_px = MarkerConfig.COLLECTOR_BORDER_PX if border else 0
    inset = border_px / 2
    side = size_px - border_px
    if style.shape == SHAPE_ROUNDED_SQUARE:
        shape = (
            f"<rect x='{inset}' y='{inset}' width='{side}' height='{side}' "
            f"rx='{MarkerConfig.CLIENT_CORNER_RADIUS_PX}'"
        )
    else:
        shape = f"<circle cx='{size_px / 2}' cy='{size_px / 2}' r='{side / 2}'"
    stroke = f" stroke='{StyleConfig.MARKER_BORDER_COLOR}' stroke-width='{border_px}'" if border else ""
    svg = (
        f"<svg xmlns='http://www.w3.org/2000/svg' width='{size_px}' height='{size_px}'>"
        f"{shape} fill='{fill}' fill-opacity='{fill_opacity}'{stroke}/></svg>"
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")


def icon_spec(style: MarkerStyle) -> dict[str, Any]:
    """IconLayer icon definition for a marker style, anchored per style.anchor."""
    return {
        "url": _svg_icon(style=style, size_px=style.size_px, fill=style.color),
        "width": style.size_px,
        "height": style.size_px,
        "anchorX": style.anchor[0],
        "anchorY": style.anchor[1],
    }


def halo_icon_spec(style: MarkerStyle) -> dict[str, Any]:
    """Translucent ring centered on the glyph of a pulsing marker."""
    size = 2 * MarkerConfig.PULSE_RADIUS_PX
    # Shift so the halo center matches the glyph center, not the anchor point
    glyph_center_above_anchor = style.anchor[1] - style.size_px / 2
    return {
        "url": _svg_icon(
            style=style,
            size_px=size,
            fill=style.color,
            fill_opacity=round(MarkerConfig.PULSE_ALPHA / 255, 3),
            border=False,
        ),
        "width": size,
        "height": size,
        "anchorX": size / 2,
        "anchorY": size / 2 + glyph_center_above_anchor,
    }


@dataclass
class OverlaySet:
    """Layer records currently owned by one map surface.

    Each list holds plain dicts ready to be used as deck.gl layer data.
    """

    route_shadow: list[dict[str, Any]] = field(default_factory=list)
    route_line: list[dict[str, Any]] = field(default_factory=list)
    route_direction: list[dict[str, Any]] = field(default_factory=list)
    client_markers: list[dict[str, Any]] = field(default_factory=list)
    collector_halos: list[dict[str, Any]] = field(default_factory=list)
    collector_markers: list[dict[str, Any]] = field(default_factory=list)
    waypoint_markers: list[dict[str, Any]] = field(default_factory=list)

    @property
    def collector_marker_count(self) -> int:
        return len(self.collector_markers)

    @property
    def client_marker_count(self) -> int:
        return len(self.client_markers)

    @property
    def waypoint_count(self) -> int:
        return len(self.waypoint_markers)

    @property
    def route_point_count(self) -> int:
        """Points in the primary route line, 0 if no route is drawn."""
        return sum(len(r["path"]) for r in self.route_line)

    @property
    def has_route(self) -> bool:
        return bool(self.route_shadow or self.route_line or self.route_direction)

    @property
    def is_empty(self) -> bool:
        return not (self.has_route or self.client_markers or self.collector_markers or self.waypoint_markers)

    def clear_markers(self) -> None:
        self.client_markers = []
        self.collector_halos = []
        self.collector_markers = []

    def clear_route(self) -> None:
        self.route_shadow = []
        self.route_line = []
        self.route_direction = []
        self.waypoint_markers = []

    def clear(self) -> None:
        self.clear_markers()
        self.clear_route()

    def summary(self) -> dict[str, int]:
        """Counts used to compare two reconcile passes."""
        return {
            "collectors": self.collector_marker_count,
            "halos": len(self.collector_halos),
            "clients": self.client_marker_count,
            "route_points": self.route_point_count,
            "waypoints": self.waypoint_count,
        }


@dataclass
class LayerCollection:
    """Manages Pydeck layers with correct z-ordering.

    Z-order (back to front): route → clients → halos → collectors → waypoints

    Waypoints are placed last so stop markers sit on top of the collector
    marker at the route's current endpoint and get click priority.
    """

    route: list[pdk.Layer] = field(default_factory=list)
    clients: list[pdk.Layer] = field(default_factory=list)
    halos: list[pdk.Layer] = field(default_factory=list)
    collectors: list[pdk.Layer] = field(default_factory=list)
    waypoints: list[pdk.Layer] = field(default_factory=list)

    def get_ordered_layers(self) -> list[pdk.Layer]:
        """Return all layers in correct z-order (back to front)."""
        return self.route + self.clients + self.halos + self.collectors + self.waypoints


class MapSurfaceController:
    """Owns one map surface: basemap, overlay records and their lifecycle.

    Can be used as a context manager, which mounts on entry and disposes on exit:

    Example:
        with MapSurfaceController(name="main") as surface:
            surface.reconcile(roster=collectors, selection=None)
            deck = surface.to_deck(view_state=view_state)
    """

    def __init__(self, name: str = "map") -> None:
        self.name = name
        self.lifecycle = MapLifecycle.create(name=name)
        self.overlays = OverlaySet()
        self.map_style: dict[str, object] | None = None
        self.route: ReconstructedRoute | None = None
        self.skipped_count = 0
        self.reconcile_count = 0

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_ready(self) -> bool:
        return self.lifecycle.is_ready

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle.is_disposed

    def mount(self) -> bool:
        """Create the base surface and its persistent tile layers, once.

        Returns:
            True if this call mounted the surface, False if it was already
            mounted or has been disposed.
        """
        if not self.lifecycle.try_transition("mount"):
            return False
        self.map_style = build_basemap_style()
        self.overlays = OverlaySet()
        self.route = None
        return True

    def dispose(self) -> None:
        """Release all overlays and the surface. Safe to call more than once."""
        if self.lifecycle.is_disposed:
            logger.debug(f"[MAP] {self.name}: already disposed")
            return
        if not self.lifecycle.try_transition("dispose"):
            return
        self.overlays.clear()
        self.route = None
        self.map_style = None

    def __enter__(self) -> "MapSurfaceController":
        self.mount()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    # =========================================================================
    # RECONCILE
    # =========================================================================

    def reconcile(
        self,
        roster: Sequence[Collector],
        selection: str | None,
        show_clients: bool = True,
        show_route_history: bool = True,
        now: datetime | None = None,
    ) -> bool:
        """Bring overlays into agreement with a roster snapshot.

        Args:
            roster: Collectors to show (already filtered by the host)
            selection: Selected collector ID, or None
            show_clients: Place a client marker per collector with a current task
            show_route_history: Draw the selected collector's route and waypoints
            now: Reference time for "last update" recency (defaults to now)

        Returns:
            True if overlays were rebuilt, False if the surface is not Ready.
        """
        if not self.is_ready:
            logger.info(
                f"[MAP] {self.name}: reconcile ignored in state {self.lifecycle.get_state_name()}"
            )
            return False

        self.skipped_count = 0
        self.overlays.clear_markers()
        for collector in roster:
            self._add_collector(collector=collector, now=now)

        if show_clients:
            for collector in roster:
                self._add_client(collector=collector)

        self.overlays.clear_route()
        self.route = None
        selected = next((c for c in roster if c.id == selection), None) if selection else None
        if selected is not None and show_route_history:
            self.route = reconstruct_route(collector=selected)
            if self.route is not None:
                self._add_route(route=self.route, collector=selected, now=now)

        self.reconcile_count += 1
        counts = self.overlays.summary()
        logger.info(
            f"[MAP] {self.name}: reconcile #{self.reconcile_count} "
            f"collectors={counts['collectors']} clients={counts['clients']} "
            f"route_points={counts['route_points']} waypoints={counts['waypoints']} "
            f"skipped={self.skipped_count}"
        )
        return True

    def _skip(self, what: str, lat: float, lon: float) -> None:
        self.skipped_count += 1
        logger.warning(f"[MAP] Skipping {what}: invalid coordinate ({lat}, {lon})")

    def _add_collector(self, collector: Collector, now: datetime | None) -> None:
        location = collector.current_location
        if not location.is_valid:
            self._skip(what=f"collector {collector.id}", lat=location.lat, lon=location.lon)
            return

        style = collector_marker(status=collector.status)
        position = list(location.lon_lat)
        self.overlays.collector_markers.append(
            {
                "type": ClickConfig.TYPE_COLLECTOR,
                "id": collector.id,
                "position": position,
                "name": collector.name,
                "status": collector.status_enum.value,
                "icon": icon_spec(style),
                "size": style.size_px,
                "popup_html": collector_popup(collector=collector, now=now),
            }
        )
        if style.pulse:
            self.overlays.collector_halos.append(
                {
                    "id": collector.id,
                    "position": position,
                    "icon": halo_icon_spec(style),
                    "size": 2 * MarkerConfig.PULSE_RADIUS_PX,
                }
            )

    def _add_client(self, collector: Collector) -> None:
        """One client marker per collector-task pair; shared clients are not deduplicated."""
        task = collector.current_task
        if task is None:
            return
        location = task.client.location
        if not location.is_valid:
            self._skip(what=f"client {task.client.id}", lat=location.lat, lon=location.lon)
            return

        style = client_marker()
        self.overlays.client_markers.append(
            {
                "type": ClickConfig.TYPE_CLIENT,
                "id": f"{task.client.id}:{collector.id}",
                "client_id": task.client.id,
                "collector_id": collector.id,
                "position": list(location.lon_lat),
                "name": task.client.company_name,
                "icon": icon_spec(style),
                "size": style.size_px,
                "popup_html": client_popup(task=task),
            }
        )

    def _add_route(self, route: ReconstructedRoute, collector: Collector, now: datetime | None) -> None:
        path = route.path_lon_lat
        skipped_points = route.point_count - len(path)
        self.skipped_count += skipped_points

        # A single remaining point cannot form a line; waypoints still render
        if len(path) >= 2:
            color = hex_to_rgba(RouteConfig.LINE_COLOR)
            route_info = (
                f"<b>{collector.name}</b><br/>Route: {route.point_count} points, "
                f"{format_distance_m(route.total_distance_m)}"
            )
            self.overlays.route_shadow.append(
                {"id": route.collector_id, "path": path, "color": color[:3] + [RouteConfig.SHADOW_ALPHA]}
            )
            self.overlays.route_line.append(
                {
                    "type": "route",
                    "id": route.collector_id,
                    "path": path,
                    "color": color[:3] + [RouteConfig.LINE_ALPHA],
                    "popup_html": route_info,
                }
            )
            self.overlays.route_direction.append(
                {
                    "id": route.collector_id,
                    "path": path,
                    "color": hex_to_rgba(RouteConfig.DIRECTION_COLOR, alpha=RouteConfig.DIRECTION_ALPHA),
                    "dash": list(RouteConfig.DIRECTION_DASH),
                }
            )

        for waypoint in route.waypoints:
            location = waypoint.location
            if not location.is_valid:
                logger.warning(
                    f"[ROUTE] Skipping waypoint {waypoint.index} of {route.collector_id}: "
                    f"invalid coordinate ({location.lat}, {location.lon})"
                )
                continue
            if waypoint.role is WaypointRole.CURRENT:
                style = current_location_marker()
                label = ""
            else:
                style = waypoint_marker(
                    index=waypoint.index,
                    is_start=waypoint.is_start,
                    has_client_visit=waypoint.has_client_visit,
                )
                label = style.label
            self.overlays.waypoint_markers.append(
                {
                    "type": ClickConfig.TYPE_WAYPOINT,
                    "id": f"{route.collector_id}:{waypoint.index}",
                    "index": waypoint.index,
                    "role": waypoint.role.value,
                    "position": list(location.lon_lat),
                    "icon": icon_spec(style),
                    "size": style.size_px,
                    "label": label,
                    "popup_html": waypoint_popup(waypoint=waypoint, now=now),
                }
            )

    # =========================================================================
    # PYDECK LAYERS
    # =========================================================================

    def build_layers(self) -> list[pdk.Layer]:
        """Turn the current overlay records into ordered pydeck layers."""
        layers = LayerCollection()
        overlays = self.overlays

        if overlays.has_route:
            layers.route.append(
                pdk.Layer(
                    "PathLayer",
                    overlays.route_shadow,
                    get_path="path",
                    get_color="color",
                    get_width=RouteConfig.SHADOW_WIDTH_PX,
                    width_units="pixels",
                    cap_rounded=True,
                    joint_rounded=True,
                    id="route_shadow",
                )
            )
            layers.route.append(
                pdk.Layer(
                    "PathLayer",
                    overlays.route_line,
                    get_path="path",
                    get_color="color",
                    get_width=RouteConfig.LINE_WIDTH_PX,
                    width_units="pixels",
                    cap_rounded=True,
                    joint_rounded=True,
                    pickable=True,
                    id="route_line",
                )
            )
            layers.route.append(
                pdk.Layer(
                    "PathLayer",
                    overlays.route_direction,
                    get_path="path",
                    get_color="color",
                    get_width=RouteConfig.DIRECTION_WIDTH_PX,
                    width_units="pixels",
                    get_dash_array="dash",
                    dash_justified=True,
                    extensions=[{"@@type": "PathStyleExtension", "dash": True}],
                    id="route_direction",
                )
            )

        if overlays.client_markers:
            layers.clients.append(self._icon_layer(data=overlays.client_markers, layer_id="clients", pickable=True))

        if overlays.collector_halos:
            layers.halos.append(
                self._icon_layer(data=overlays.collector_halos, layer_id="collector_halos", pickable=False)
            )

        if overlays.collector_markers:
            layers.collectors.append(
                self._icon_layer(data=overlays.collector_markers, layer_id="collectors", pickable=True)
            )

        if overlays.waypoint_markers:
            layers.waypoints.append(
                self._icon_layer(data=overlays.waypoint_markers, layer_id="waypoints", pickable=True)
            )
            layers.waypoints.append(
                pdk.Layer(
                    "TextLayer",
                    [w for w in overlays.waypoint_markers if w["label"]],
                    get_position="position",
                    get_text="label",
                    get_color=hex_to_rgba(StyleConfig.MARKER_BORDER_COLOR),
                    get_size=MarkerConfig.WAYPOINT_SIZE_PX / 2,
                    size_units="pixels",
                    get_text_anchor="'middle'",
                    get_alignment_baseline="'center'",
                    id="waypoint_labels",
                )
            )

        return layers.get_ordered_layers()

    @staticmethod
    def _icon_layer(data: list[dict[str, Any]], layer_id: str, pickable: bool) -> pdk.Layer:
        return pdk.Layer(
            "IconLayer",
            data,
            get_position="position",
            get_icon="icon",
            get_size="size",
            size_units="pixels",
            pickable=pickable,
            auto_highlight=pickable,
            id=layer_id,
        )

    def to_deck(self, view_state: pdk.ViewState) -> pdk.Deck | None:
        """Assemble the deck for display, or None if the surface is not Ready."""
        if not self.is_ready:
            logger.info(f"[MAP] {self.name}: to_deck ignored in state {self.lifecycle.get_state_name()}")
            return None

        return pdk.Deck(
            map_style=self.map_style,
            map_provider="mapbox",  # Required when map_style is a dict
            initial_view_state=view_state,
            layers=self.build_layers(),
            tooltip=self._create_tooltip_config(),
            parameters={"pickingRadius": ClickConfig.PICKING_RADIUS_PX},
        )

    @staticmethod
    def _create_tooltip_config() -> dict[str, str | dict[str, str]]:
        """Per-object popup markup rendered as the deck tooltip."""
        return {
            "html": "{popup_html}",
            "style": ClickConfig.TOOLTIP_STYLE,
        }

    def __repr__(self) -> str:
        return f"MapSurfaceController({self.name}, {self.lifecycle.get_state_name()}, {self.overlays.summary()})"
