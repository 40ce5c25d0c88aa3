"""Collection Tracker - live field collector map.

Shows field collectors on a satellite map with status markers, the clients
of their current tasks and the selected collector's route history, plus
financial year collection statistics.

Run: streamlit run collector_tracker/app.py
"""

import logging
import traceback

import streamlit as st

from collector_tracker.constants import AppConfig
from collector_tracker.core.statistics import collectors_in_year, compute_summary
from collector_tracker.model.roster import Roster, RosterLoadError, load_roster
from collector_tracker.ui import (
    CollectionChart,
    DashboardContext,
    SidebarRenderer,
    dispose_map_session,
    render_center_map,
    render_right_panel,
    render_summary_stats,
)
from collector_tracker.ui.infra import bump_map_version, get_map_version

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


def init_session_state() -> None:
    """Initialize session state with dashboard context and map version."""
    if "context" not in st.session_state:
        st.session_state.context = DashboardContext()

    if "map_version" not in st.session_state:
        st.session_state.map_version = 0


def reset_ui_state() -> None:
    """Reset UI state to initial while preserving the loaded roster.

    Called when an error occurs to recover gracefully. Resets:
    - Dashboard context to a fresh instance (keeps the roster path)
    - Map session (disposed) and map version (forces a fresh mount)
    """
    logger.info("Resetting UI state due to error recovery")

    old_ctx: DashboardContext | None = st.session_state.get("context")
    ctx = DashboardContext()
    if old_ctx is not None:
        ctx.roster_path = old_ctx.roster_path
    st.session_state.context = ctx

    dispose_map_session()
    bump_map_version()

    logger.info("UI state reset complete - roster preserved")


def load_roster_into_session(force: bool = False) -> Roster | None:
    """Load the roster file named in the context, caching it in session state.

    Returns:
        The roster, or None if it could not be loaded (error already shown).
    """
    ctx: DashboardContext = st.session_state.context
    cached: Roster | None = st.session_state.get("roster")
    if cached is not None and not force and st.session_state.get("roster_path") == ctx.roster_path:
        return cached

    try:
        roster = load_roster(ctx.roster_path)
    except RosterLoadError as e:
        logger.error(f"[ROSTER] {e}")
        ctx.messages.error = f"Could not load roster: {e}"
        st.error(ctx.messages.error)
        return None

    ctx.messages.clear()
    st.session_state.roster = roster
    st.session_state.roster_path = ctx.roster_path
    if ctx.selected_collector_id is not None and roster.get_collector(ctx.selected_collector_id) is None:
        ctx.clear_selection()
    return roster


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)
    init_session_state()

    st.title(f"{AppConfig.ICON} {AppConfig.TITLE}")
    st.caption(AppConfig.SUBTITLE)

    try:
        _run_app_ui()
    except Exception as e:
        # Log full traceback for debugging
        error_msg = f"{type(e).__name__}: {e}"
        full_traceback = traceback.format_exc()
        logger.error(f"[UI] UI error caught: {error_msg}\n{full_traceback}")

        st.error(f"⚠️ [UI] Something went wrong: {error_msg}")

        # Reset UI state while preserving the roster
        reset_ui_state()

        if st.button("🔄 Reset and Continue", type="primary"):
            st.rerun()


def _run_app_ui() -> None:
    """Run the main application UI. Separated for error handling wrapper."""
    ctx: DashboardContext = st.session_state.context

    roster = load_roster_into_session()
    if roster is None:
        roster = Roster()

    sidebar = SidebarRenderer(context=ctx, roster=roster)
    actions = sidebar.render()
    if actions.get("reload_roster"):
        reloaded = load_roster_into_session(force=True)
        if reloaded is not None:
            roster = reloaded

    logger.info(f"[RENDER] Render cycle: {ctx!r}, map_version={get_map_version()}")

    render_summary_stats(compute_summary(roster=roster, financial_year=ctx.filters.financial_year))

    collectors = roster.filter_collectors(search=ctx.filters.search, status=ctx.filters.status)
    selected = roster.get_collector(ctx.selected_collector_id)

    col_map, col_ctrl = st.columns([3, 1])
    with col_map:
        session = render_center_map(collectors=collectors, ctx=ctx)
    with col_ctrl:
        render_right_panel(session=session, selected=selected, ctx=ctx)

    chart = CollectionChart()
    fig = chart.render(
        collectors=collectors_in_year(roster=roster, financial_year=ctx.filters.financial_year),
        financial_year=ctx.filters.financial_year,
        selected_id=ctx.selected_collector_id,
    )
    st.plotly_chart(fig, key="collection_chart")


if __name__ == "__main__":
    main()
