"""Right panel - map legend, route history toggle and collector details.

The legend and the route toggle belong to the mounted map: the toggle writes
straight into the session's InteractionDispatcher, which resets on remount.
"""

import logging

import streamlit as st

from collector_tracker.constants import RouteConfig, StyleConfig
from collector_tracker.core.formatting import (
    format_clock_time,
    format_distance_m,
    format_duration_minutes,
    format_inr,
)
from collector_tracker.core.route_reconstructor import ReconstructedRoute
from collector_tracker.model.collector import Collector
from collector_tracker.ui.center_map import MapSession
from collector_tracker.ui.infra import trigger_rerun
from collector_tracker.ui.state_machine import DashboardContext

logger = logging.getLogger(__name__)


def _swatch(color: str, label: str, square: bool = False) -> str:
    radius = "3px" if square else "50%"
    return (
        f"<span style='display:inline-block;width:10px;height:10px;border-radius:{radius};"
        f"background:{color};margin-right:6px'></span>{label}"
    )


def render_status_legend() -> None:
    """Collector status colors plus the client marker."""
    items = [
        _swatch(StyleConfig.STATUS_COLORS[status], f"{StyleConfig.STATUS_EMOJIS[status]} {status.title()}")
        for status in StyleConfig.STATUS_COLORS
    ]
    items.append(_swatch(StyleConfig.CLIENT_COLOR, "Client", square=True))
    st.markdown("<br/>".join(items), unsafe_allow_html=True)


def render_route_controls(session: MapSession, route: ReconstructedRoute | None) -> None:
    """Route history toggle and, while shown, the waypoint/line legend."""
    dispatcher = session.dispatcher
    visible = st.toggle(
        "Show route history",
        value=dispatcher.show_route_history,
        key=f"route_toggle_{session.version}",
        help="Draw the selected collector's path with numbered stops",
    )
    if visible != dispatcher.show_route_history:
        dispatcher.set_route_history_visible(visible)
        trigger_rerun()

    if not dispatcher.show_route_history:
        return

    legend = [
        _swatch(StyleConfig.WAYPOINT_COLORS[role], StyleConfig.WAYPOINT_LABELS[role])
        for role in StyleConfig.WAYPOINT_COLORS
    ]
    legend.append(
        f"<span style='display:inline-block;width:18px;border-top:3px solid {RouteConfig.LINE_COLOR};"
        f"margin-right:6px;vertical-align:middle'></span>Route path"
    )
    st.markdown("<br/>".join(legend), unsafe_allow_html=True)

    if route is not None:
        st.caption(
            f"{route.point_count} points · {format_distance_m(route.total_distance_m)} · "
            f"{format_duration_minutes(route.total_dwell_minutes)} at stops · "
            f"{route.client_visit_count} client visits"
        )


def render_collector_detail(collector: Collector, ctx: DashboardContext) -> None:
    """Contact details, totals, current task and location history timeline."""
    header_col, close_col = st.columns([4, 1])
    with header_col:
        st.markdown(
            f"### {collector.initials} · {collector.name}\n"
            f"{StyleConfig.STATUS_EMOJIS[collector.status_enum.value]} `{collector.status_enum.value}`"
        )
    with close_col:
        if st.button("✖", key="close_detail", help="Close details"):
            ctx.clear_selection()
            trigger_rerun()

    st.caption(f"📞 {collector.phone}  \n✉️ {collector.email}  \n📍 {collector.current_location.address or ''}")

    col_total, col_tasks = st.columns(2)
    col_total.metric("Total Collected", format_inr(collector.total_collected))
    col_tasks.metric("Tasks Completed", collector.tasks_completed)

    task = collector.current_task
    if task is not None:
        st.markdown("**Current Task**")
        with st.container(border=True):
            st.markdown(f"**{task.client.company_name}**  \n{task.client.name}")
            st.caption(task.client.address)
            st.markdown(
                f"Amount to collect: **{format_inr(task.amount_to_collect)}**  \n"
                f"Collected: **{format_inr(task.amount_collected)}**"
            )
            st.caption(task.description)

    st.markdown("**Location History**")
    if not collector.location_history:
        st.caption("No tracked locations yet")
    for entry in collector.location_history:
        line = f"**{entry.location.address or 'Unknown location'}** · {format_clock_time(entry.location.timestamp)}"
        if entry.duration_minutes > 0:
            line += f" · ⏱ {format_duration_minutes(entry.duration_minutes)}"
        if entry.client_visited is not None:
            line += f"  \nVisited: {entry.client_visited.company_name}"
        st.markdown(line)


def render_right_panel(
    session: MapSession,
    selected: Collector | None,
    ctx: DashboardContext,
) -> None:
    """Legend, route controls and detail panel for the current selection."""
    with st.expander("Legend", expanded=selected is None):
        render_status_legend()

    render_route_controls(session=session, route=session.surface.route)

    if selected is not None:
        st.divider()
        render_collector_detail(collector=selected, ctx=ctx)
