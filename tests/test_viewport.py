"""Tests for ViewportController camera decisions and fit math.

Viewport size is the nominal MapConfig viewport (900 x 600 px).
"""

from math import log2

import pytest

from collector_tracker.constants import MapConfig
from collector_tracker.core.geo_bounds import GeoBounds, compute_bounds
from collector_tracker.core.route_reconstructor import reconstruct_route
from collector_tracker.model.collector import Collector
from collector_tracker.ui.state_machine import MapContext
from collector_tracker.ui.viewport import CameraReason, ViewportController, fit_center, fit_zoom
from conftest import make_collector

NAN = float("nan")


class TestFitMath:
    """fit_zoom / fit_center in Web Mercator."""

    def test_point_capped_at_max_fit_zoom(self) -> None:
        """A single point must not zoom to street level."""
        bounds = GeoBounds(min_lat=23.0, min_lon=72.5, max_lat=23.0, max_lon=72.5)
        assert fit_zoom(bounds=bounds, padding_px=50) == MapConfig.MAX_FIT_ZOOM

    def test_whole_world_lon_span(self) -> None:
        """360° across 800 usable px is zoom log2(800/256)."""
        bounds = GeoBounds(min_lat=0.0, min_lon=-180.0, max_lat=0.0, max_lon=180.0)
        zoom = fit_zoom(bounds=bounds, padding_px=50, width_px=900, height_px=600)
        assert zoom == pytest.approx(max(MapConfig.MIN_ZOOM, log2(800 / 256)))

    def test_more_padding_zooms_out(self) -> None:
        bounds = GeoBounds(min_lat=22.99, min_lon=72.51, max_lat=23.05, max_lon=72.60)
        assert fit_zoom(bounds=bounds, padding_px=60) < fit_zoom(bounds=bounds, padding_px=10)

    def test_larger_area_zooms_out(self) -> None:
        small = GeoBounds(min_lat=23.00, min_lon=72.50, max_lat=23.01, max_lon=72.51)
        large = GeoBounds(min_lat=22.90, min_lon=72.40, max_lat=23.10, max_lon=72.70)
        assert fit_zoom(bounds=large, padding_px=50) < fit_zoom(bounds=small, padding_px=50)

    def test_fitted_bounds_fit_the_viewport(self) -> None:
        """At the fitted zoom, the bounds span no more than the usable pixels."""
        bounds = GeoBounds(min_lat=22.995, min_lon=72.515, max_lat=23.05, max_lon=72.60)
        zoom = fit_zoom(bounds=bounds, padding_px=50, width_px=900, height_px=600)
        world_px = MapConfig.TILE_SIZE_PX * 2**zoom
        assert bounds.lon_span / 360 * world_px <= 800 + 1e-6

    def test_fit_center_longitude_midpoint(self) -> None:
        bounds = GeoBounds(min_lat=23.0, min_lon=72.5, max_lat=23.1, max_lon=72.7)
        lat, lon = fit_center(bounds)
        assert lon == pytest.approx(72.6)
        assert 23.0 < lat < 23.1

    def test_fit_center_latitude_is_mercator_midpoint(self) -> None:
        """At high latitude, the Mercator midpoint lies north of the arithmetic one."""
        bounds = GeoBounds(min_lat=50.0, min_lon=0.0, max_lat=70.0, max_lon=1.0)
        lat, _ = fit_center(bounds)
        assert lat > 60.0


class TestDecide:
    """Camera rules in priority order."""

    def test_no_selection_fits_all(self, collectors: list[Collector]) -> None:
        move = ViewportController().decide(roster=collectors, selection=None)
        assert move is not None
        assert move.reason == CameraReason.FIT_ALL
        assert move.padding_px == MapConfig.FIT_PADDING_PX
        bounds = compute_bounds(c.current_location.coordinate for c in collectors)
        assert bounds is not None
        assert (move.latitude, move.longitude) == pytest.approx(fit_center(bounds))

    def test_selected_with_route_fits_route(self, collectors: list[Collector], active_collector: Collector) -> None:
        route = reconstruct_route(active_collector)
        move = ViewportController().decide(roster=collectors, selection="collector-1", route=route)
        assert move is not None
        assert move.reason == CameraReason.FIT_ROUTE
        assert move.padding_px == MapConfig.ROUTE_FIT_PADDING_PX

    def test_selected_without_route_centers(self, collectors: list[Collector], active_collector: Collector) -> None:
        """With route history hidden the camera centers on the collector."""
        move = ViewportController().decide(roster=collectors, selection="collector-1", route=None)
        assert move is not None
        assert move.reason == CameraReason.CENTER_SELECTED
        assert move.center == active_collector.current_location.coordinate.lat_lon
        assert move.zoom == MapConfig.SELECTED_ZOOM

    def test_route_of_other_collector_ignored(self, collectors: list[Collector], active_collector: Collector) -> None:
        """A stale route from a previous selection is not fitted."""
        stale = reconstruct_route(active_collector)
        move = ViewportController().decide(roster=collectors, selection="collector-3", route=stale)
        assert move is not None
        assert move.reason == CameraReason.CENTER_SELECTED

    def test_selection_outside_roster_fits_all(self, collectors: list[Collector]) -> None:
        move = ViewportController().decide(roster=collectors[1:], selection="collector-1")
        assert move is not None
        assert move.reason == CameraReason.FIT_ALL

    def test_empty_roster_leaves_camera(self) -> None:
        assert ViewportController().decide(roster=[], selection=None) is None

    def test_all_invalid_leaves_camera(self) -> None:
        assert ViewportController().decide(roster=[make_collector("bad", lat=NAN)], selection=None) is None

    def test_selected_invalid_location_leaves_camera(self) -> None:
        roster = [make_collector("bad", lat=NAN), make_collector("ok")]
        assert ViewportController().decide(roster=roster, selection="bad") is None


class TestUpdate:
    """update() records the move in the map context."""

    def test_records_camera(self, collectors: list[Collector]) -> None:
        viewport = ViewportController()
        map_ctx = MapContext()
        move = viewport.update(roster=collectors, selection="collector-3", map_ctx=map_ctx)
        assert move is not None
        assert viewport.last_move == move
        assert map_ctx.center == (22.9950, 72.6000)
        assert map_ctx.zoom == MapConfig.SELECTED_ZOOM

    def test_no_move_keeps_context(self) -> None:
        viewport = ViewportController()
        map_ctx = MapContext()
        before = (map_ctx.center, map_ctx.zoom)
        assert viewport.update(roster=[], selection=None, map_ctx=map_ctx) is None
        assert (map_ctx.center, map_ctx.zoom) == before

    def test_view_state_from_context(self) -> None:
        map_ctx = MapContext(center=(23.0, 72.5), zoom=13)
        view_state = ViewportController().view_state(map_ctx=map_ctx)
        assert view_state.latitude == 23.0
        assert view_state.longitude == 72.5
        assert view_state.zoom == 13
