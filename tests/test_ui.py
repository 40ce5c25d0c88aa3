"""Tests for collector_tracker UI state and interaction wiring.

Tests: MapLifecycle, DashboardContext, InteractionDispatcher,
parse_deckgl_event, MapSession
Focus: Lifecycle transitions, selection semantics, click routing,
route toggle scoping per mounted map

Note: Fixtures are defined in conftest.py (ctx, collectors).
"""

import pytest
from statemachine.exceptions import TransitionNotAllowed

from collector_tracker.model.collector import Collector
from collector_tracker.ui.center_map import create_map_session
from collector_tracker.ui.interaction import InteractionDispatcher
from collector_tracker.ui.pydeck_click_handler import NO_CLICK, MapClick, parse_deckgl_event
from collector_tracker.ui.state_machine import DashboardContext, MapLifecycle


# =============================================================================
# LIFECYCLE STATE MACHINE
# =============================================================================


class TestMapLifecycle:
    """MapLifecycle - three linear states."""

    def test_initial_state(self) -> None:
        lifecycle = MapLifecycle.create(name="t")
        assert lifecycle.is_uninitialized
        assert lifecycle.get_state_name() == "Uninitialized"

    def test_full_lifecycle(self) -> None:
        lifecycle = MapLifecycle.create(name="t")
        lifecycle.mount()
        assert lifecycle.is_ready
        lifecycle.dispose()
        assert lifecycle.is_disposed
        assert lifecycle.get_state_name() == "Disposed"

    def test_mount_twice_not_allowed(self) -> None:
        lifecycle = MapLifecycle.create(name="t", add_log_listener=False)
        lifecycle.mount()
        with pytest.raises(TransitionNotAllowed):
            lifecycle.mount()

    def test_dispose_before_mount_not_allowed(self) -> None:
        lifecycle = MapLifecycle.create(name="t", add_log_listener=False)
        with pytest.raises(TransitionNotAllowed):
            lifecycle.dispose()

    def test_try_transition_returns_false(self) -> None:
        """try_transition turns a disallowed event into False."""
        lifecycle = MapLifecycle.create(name="t")
        assert lifecycle.try_transition("dispose") is False
        assert lifecycle.try_transition("mount") is True
        assert lifecycle.try_transition("mount") is False
        assert lifecycle.try_transition("dispose") is True
        assert lifecycle.try_transition("dispose") is False
        assert lifecycle.try_transition("mount") is False
        assert lifecycle.is_disposed


# =============================================================================
# DASHBOARD CONTEXT
# =============================================================================


class TestDashboardContext:
    """Host-view state: selection, toggles, filters."""

    def test_defaults(self, ctx: DashboardContext) -> None:
        assert ctx.selected_collector_id is None
        assert ctx.display.show_clients is True
        assert ctx.filters.status == "all"
        assert ctx.filters.financial_year == "FY2024-25"

    def test_select_replaces(self, ctx: DashboardContext) -> None:
        """At most one collector is selected."""
        ctx.select_collector("collector-1")
        ctx.select_collector("collector-2")
        assert ctx.selected_collector_id == "collector-2"

    def test_toggle(self, ctx: DashboardContext) -> None:
        """Toggling the selected collector clears the selection."""
        ctx.toggle_collector("collector-1")
        assert ctx.selected_collector_id == "collector-1"
        ctx.toggle_collector("collector-1")
        assert ctx.selected_collector_id is None

    def test_clear_filters(self, ctx: DashboardContext) -> None:
        ctx.filters.search = "arjun"
        ctx.filters.status = "active"
        ctx.filters.clear()
        assert ctx.filters.search == ""
        assert ctx.filters.status == "all"


# =============================================================================
# INTERACTION DISPATCHER
# =============================================================================


class TestInteractionDispatcher:
    """Click forwarding and route history toggle."""

    @pytest.fixture
    def selected(self) -> list[str]:
        return []

    @pytest.fixture
    def dispatcher(self, selected: list[str]) -> InteractionDispatcher:
        return InteractionDispatcher(on_select=selected.append)

    def test_collector_click_forwarded(self, dispatcher: InteractionDispatcher, selected: list[str]) -> None:
        assert dispatcher.dispatch_click({"type": "collector", "id": "collector-2"}) == "collector-2"
        assert selected == ["collector-2"]

    @pytest.mark.parametrize(
        "clicked",
        [
            None,
            {"type": "client", "id": "client-1:collector-1"},
            {"type": "waypoint", "id": "collector-1:0"},
            {"type": "route", "id": "collector-1"},
            {"type": "collector"},
            {"id": "collector-1"},
        ],
    )
    def test_other_clicks_ignored(
        self, dispatcher: InteractionDispatcher, selected: list[str], clicked: dict[str, str] | None
    ) -> None:
        """Only collector markers with an id change the selection."""
        assert dispatcher.dispatch_click(clicked) is None
        assert selected == []

    def test_route_history_toggle(self, dispatcher: InteractionDispatcher) -> None:
        """Route history is shown by default and flips on toggle."""
        assert dispatcher.show_route_history is True
        assert dispatcher.toggle_route_history() is False
        assert dispatcher.toggle_route_history() is True
        dispatcher.set_route_history_visible(False)
        assert dispatcher.show_route_history is False

    def test_map_click_reselects(self, ctx: DashboardContext) -> None:
        """Clicking the selected collector on the map keeps it selected."""
        dispatcher = InteractionDispatcher(on_select=ctx.select_collector)
        dispatcher.dispatch_click({"type": "collector", "id": "collector-1"})
        dispatcher.dispatch_click({"type": "collector", "id": "collector-1"})
        assert ctx.selected_collector_id == "collector-1"


# =============================================================================
# CLICK EVENT PARSING
# =============================================================================


class TestParseDeckglEvent:
    """st_deckgl event payloads."""

    def test_no_event(self) -> None:
        assert parse_deckgl_event(None) is NO_CLICK
        assert parse_deckgl_event({}) is NO_CLICK
        assert parse_deckgl_event("click") is NO_CLICK

    def test_bare_map_click(self) -> None:
        click = parse_deckgl_event({"coordinate": [72.55, 23.03], "eventType": "click"})
        assert not click.is_marker_click
        assert click.coordinate == (72.55, 23.03)
        assert click.picked_type is None

    def test_marker_click(self) -> None:
        """Record properties are spread into the event."""
        event = {"type": "collector", "id": "collector-1", "position": [72.556, 23.034],
                 "coordinate": [72.556, 23.034], "eventType": "click"}
        click = parse_deckgl_event(event)
        assert click.is_marker_click
        assert click.picked_type == "collector"
        assert click.picked == {"type": "collector", "id": "collector-1", "position": [72.556, 23.034]}

    def test_signature(self) -> None:
        """Signatures combine record identity and rounded coordinates."""
        click = MapClick(picked={"type": "collector", "id": "collector-1"}, coordinate=(72.556, 23.034))
        assert click.signature() == "collector:collector-1@72.55600,23.03400"
        assert NO_CLICK.signature() == ""


# =============================================================================
# MAP SESSION
# =============================================================================


class TestMapSession:
    """One mounted map per map version."""

    def test_create_mounts_surface(self, ctx: DashboardContext) -> None:
        session = create_map_session(version=3, ctx=ctx)
        assert session.surface.is_ready
        assert session.surface.name == "map-v3"
        assert session.dispatcher.show_route_history is True

    def test_dispatcher_selects_in_context(self, ctx: DashboardContext) -> None:
        session = create_map_session(version=0, ctx=ctx)
        session.dispatcher.dispatch_click({"type": "collector", "id": "collector-4"})
        assert ctx.selected_collector_id == "collector-4"

    def test_remount_resets_route_toggle(self, ctx: DashboardContext, collectors: list[Collector]) -> None:
        """A new map version gets a fresh dispatcher, route history visible again."""
        old = create_map_session(version=0, ctx=ctx)
        old.dispatcher.set_route_history_visible(False)
        old.surface.reconcile(roster=collectors, selection="collector-1")
        old.close()
        assert old.surface.is_disposed
        assert old.surface.overlays.is_empty

        new = create_map_session(version=1, ctx=ctx)
        assert new.dispatcher.show_route_history is True
        new.surface.reconcile(
            roster=collectors,
            selection="collector-1",
            show_route_history=new.dispatcher.show_route_history,
        )
        assert new.surface.overlays.route_point_count == 4
