"""Center map - wires the map surface into the Streamlit run loop.

One MapSession lives in st.session_state per map version:
- MapSurfaceController (mounted on creation, disposed when replaced)
- InteractionDispatcher (route history toggle, click forwarding)
- ViewportController (camera decision after every reconcile)

Bumping the map version (ui.infra.bump_map_version) remounts the map. The
previous surface is disposed before the new one is mounted, so a remount
never leaks overlays from the old surface.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import streamlit as st

from collector_tracker.constants import ChartConfig
from collector_tracker.model.collector import Collector
from collector_tracker.ui.infra import get_map_version, trigger_rerun
from collector_tracker.ui.interaction import InteractionDispatcher
from collector_tracker.ui.map_surface import MapSurfaceController
from collector_tracker.ui.pydeck_click_handler import render_tracker_map
from collector_tracker.ui.state_machine import DashboardContext
from collector_tracker.ui.viewport import ViewportController

logger = logging.getLogger(__name__)

MAP_SESSION_KEY = "map_session"


@dataclass
class MapSession:
    """Everything owned by one mounted map."""

    version: int
    surface: MapSurfaceController
    dispatcher: InteractionDispatcher
    viewport: ViewportController

    def close(self) -> None:
        self.surface.dispose()


def create_map_session(version: int, ctx: DashboardContext) -> MapSession:
    """Build and mount a fresh map session."""
    surface = MapSurfaceController(name=f"map-v{version}")
    surface.mount()
    return MapSession(
        version=version,
        surface=surface,
        dispatcher=InteractionDispatcher(on_select=ctx.select_collector),
        viewport=ViewportController(),
    )


def get_map_session(ctx: DashboardContext) -> MapSession:
    """Return the session for the current map version, remounting if it changed."""
    version = get_map_version()
    session: MapSession | None = st.session_state.get(MAP_SESSION_KEY)
    if session is not None and session.version == version:
        return session

    if session is not None:
        logger.info(f"[MAP] Remounting map: v{session.version} -> v{version}")
        session.close()

    session = create_map_session(version=version, ctx=ctx)
    st.session_state[MAP_SESSION_KEY] = session
    return session


def dispose_map_session() -> None:
    """Dispose the current map session, if any (e.g., on error recovery)."""
    session: MapSession | None = st.session_state.pop(MAP_SESSION_KEY, None)
    if session is not None:
        session.close()


def render_center_map(
    collectors: Sequence[Collector],
    ctx: DashboardContext,
    now: datetime | None = None,
) -> MapSession:
    """Reconcile, move the camera, render the deck and dispatch clicks.

    Args:
        collectors: Filtered roster shown on the map
        ctx: Dashboard context (selection, client toggle, camera)
        now: Reference time for recency in popups

    Returns:
        The MapSession used for this run.
    """
    session = get_map_session(ctx=ctx)
    surface = session.surface
    selection = ctx.selected_collector_id

    surface.reconcile(
        roster=collectors,
        selection=selection,
        show_clients=ctx.display.show_clients,
        show_route_history=session.dispatcher.show_route_history,
        now=now,
    )
    session.viewport.update(roster=collectors, selection=selection, route=surface.route, map_ctx=ctx.map)

    deck = surface.to_deck(view_state=session.viewport.view_state(map_ctx=ctx.map))
    if deck is None:
        st.info("Map is not available. Use Reload map to remount it.")
        return session

    logger.debug(f"[RENDER] {surface!r}")
    click = render_tracker_map(deck=deck, key=f"tracker_map_{session.version}", height=ChartConfig.MAP_HEIGHT)
    if click.is_marker_click:
        previous = ctx.selected_collector_id
        collector_id = session.dispatcher.dispatch_click(clicked_object=click.picked)
        if collector_id is not None and collector_id != previous:
            trigger_rerun()
    return session
