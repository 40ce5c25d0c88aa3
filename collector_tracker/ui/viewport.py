"""ViewportController - decides where the camera goes after each reconcile.

Rules, in priority order:
1. Selected collector with a drawn route: fit the whole route (route padding)
2. Selected collector otherwise: center on its current location at close zoom
3. No selection, non-empty roster: fit all collectors' current locations
4. Empty roster (or nothing valid to fit): leave the camera unchanged

Fits compute a Web Mercator zoom from the bounds, the nominal viewport size
and symmetric pixel padding, capped at MapConfig.MAX_FIT_ZOOM so a single
point does not zoom to street level.
"""

import logging
from dataclasses import dataclass
from math import log2, pi
from typing import Sequence

import pydeck as pdk

from collector_tracker.constants import MapConfig
from collector_tracker.core.geo_bounds import GeoBounds, compute_bounds
from collector_tracker.core.geo_calculator import GeoCalculator
from collector_tracker.core.route_reconstructor import ReconstructedRoute
from collector_tracker.model.collector import Collector
from collector_tracker.ui.state_machine import MapContext

logger = logging.getLogger(__name__)


class CameraReason:
    """Why a camera move was issued."""

    FIT_ROUTE = "fit_route"
    CENTER_SELECTED = "center_selected"
    FIT_ALL = "fit_all"


@dataclass(frozen=True)
class CameraMove:
    """Animated camera transition target.

    Attributes:
        latitude: Target center latitude
        longitude: Target center longitude
        zoom: Target zoom level
        reason: One of CameraReason values
        padding_px: Padding used for a fit (0 for a center move)
    """

    latitude: float
    longitude: float
    zoom: float
    reason: str
    padding_px: int = 0

    @property
    def center(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_view_state(self, transition_duration: int = MapConfig.TRANSITION_DURATION_MS) -> pdk.ViewState:
        """Pydeck ViewState that animates to this target."""
        return pdk.ViewState(
            latitude=self.latitude,
            longitude=self.longitude,
            zoom=self.zoom,
            pitch=0,
            bearing=0,
            transition_duration=transition_duration,
        )


def fit_zoom(
    bounds: GeoBounds,
    padding_px: int,
    width_px: int = MapConfig.VIEWPORT_WIDTH_PX,
    height_px: int = MapConfig.VIEWPORT_HEIGHT_PX,
) -> float:
    """Largest zoom at which bounds fit inside the padded viewport.

    Args:
        bounds: Region to show
        padding_px: Symmetric padding on every side
        width_px: Viewport width
        height_px: Viewport height

    Returns:
        Zoom level clamped to [MIN_ZOOM, MAX_FIT_ZOOM].
    """
    usable_w = max(width_px - 2 * padding_px, 1)
    usable_h = max(height_px - 2 * padding_px, 1)
    tile = MapConfig.TILE_SIZE_PX

    zoom = float(MapConfig.MAX_FIT_ZOOM)
    if bounds.lon_span > 0:
        zoom = min(zoom, log2(usable_w * 360 / (tile * bounds.lon_span)))
    merc_span = GeoCalculator.mercator_y(bounds.max_lat) - GeoCalculator.mercator_y(bounds.min_lat)
    if merc_span > 0:
        zoom = min(zoom, log2(usable_h * 2 * pi / (tile * merc_span)))
    return max(float(MapConfig.MIN_ZOOM), zoom)


def fit_center(bounds: GeoBounds) -> tuple[float, float]:
    """(lat, lon) center of bounds, taken in Mercator space for latitude."""
    mid_y = (GeoCalculator.mercator_y(bounds.min_lat) + GeoCalculator.mercator_y(bounds.max_lat)) / 2
    return (GeoCalculator.inverse_mercator_y(mid_y), (bounds.min_lon + bounds.max_lon) / 2)


class ViewportController:
    """Computes the camera target for a roster/selection snapshot.

    Example:
        viewport = ViewportController()
        move = viewport.update(roster=collectors, selection="collector-1", route=surface.route)
        if move is not None:
            deck = surface.to_deck(view_state=move.to_view_state())
    """

    def __init__(
        self,
        width_px: int = MapConfig.VIEWPORT_WIDTH_PX,
        height_px: int = MapConfig.VIEWPORT_HEIGHT_PX,
    ) -> None:
        self.width_px = width_px
        self.height_px = height_px
        self.last_move: CameraMove | None = None

    def fit(self, bounds: GeoBounds, padding_px: int, reason: str) -> CameraMove:
        lat, lon = fit_center(bounds)
        zoom = fit_zoom(bounds=bounds, padding_px=padding_px, width_px=self.width_px, height_px=self.height_px)
        return CameraMove(latitude=lat, longitude=lon, zoom=zoom, reason=reason, padding_px=padding_px)

    def decide(
        self,
        roster: Sequence[Collector],
        selection: str | None,
        route: ReconstructedRoute | None = None,
    ) -> CameraMove | None:
        """Camera target for this snapshot, or None to leave the camera unchanged.

        Args:
            roster: Collectors currently on the map
            selection: Selected collector ID, or None
            route: Route drawn for the selected collector, if any

        Returns:
            CameraMove, or None when there is nothing to frame.
        """
        selected = next((c for c in roster if c.id == selection), None) if selection else None

        if selected is not None:
            if route is not None and route.collector_id == selected.id:
                bounds = compute_bounds(p.coordinate for p in route.points)
                if bounds is not None:
                    return self.fit(
                        bounds=bounds,
                        padding_px=MapConfig.ROUTE_FIT_PADDING_PX,
                        reason=CameraReason.FIT_ROUTE,
                    )

            location = selected.current_location
            if location.is_valid:
                return CameraMove(
                    latitude=location.lat,
                    longitude=location.lon,
                    zoom=MapConfig.SELECTED_ZOOM,
                    reason=CameraReason.CENTER_SELECTED,
                )
            logger.warning(f"[VIEWPORT] Selected collector {selected.id} has no valid location")
            return None

        bounds = compute_bounds(c.current_location.coordinate for c in roster)
        if bounds is None:
            return None
        return self.fit(bounds=bounds, padding_px=MapConfig.FIT_PADDING_PX, reason=CameraReason.FIT_ALL)

    def update(
        self,
        roster: Sequence[Collector],
        selection: str | None,
        route: ReconstructedRoute | None = None,
        map_ctx: MapContext | None = None,
    ) -> CameraMove | None:
        """Decide, remember and optionally record the move in the map context."""
        move = self.decide(roster=roster, selection=selection, route=route)
        if move is None:
            logger.debug("[VIEWPORT] No camera change")
            return None

        if move != self.last_move:
            logger.info(
                f"[VIEWPORT] {move.reason}: center=({move.latitude:.5f}, {move.longitude:.5f}) zoom={move.zoom:.2f}"
            )
        self.last_move = move
        if map_ctx is not None:
            map_ctx.center = move.center
            map_ctx.zoom = move.zoom
        return move

    def view_state(self, map_ctx: MapContext) -> pdk.ViewState:
        """ViewState for the camera currently recorded in the map context."""
        return CameraMove(
            latitude=map_ctx.center[0],
            longitude=map_ctx.center[1],
            zoom=map_ctx.zoom,
            reason="current",
        ).to_view_state()
