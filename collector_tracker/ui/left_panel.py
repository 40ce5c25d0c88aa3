"""Sidebar UI renderer for the collector tracker.

Renders the left sidebar with:
- Financial year selector
- Roster source and refresh
- Client marker toggle
- Search and status filter
- Collector list (clicking a card toggles selection)
"""

import logging
from datetime import datetime
from pathlib import Path

import streamlit as st

from collector_tracker.constants import RosterConfig, StyleConfig
from collector_tracker.core.formatting import format_inr, format_relative_time
from collector_tracker.model.collector import Collector
from collector_tracker.model.roster import Roster
from collector_tracker.ui.infra import reload_map, trigger_rerun
from collector_tracker.ui.state_machine import DashboardContext

logger = logging.getLogger(__name__)


class SidebarRenderer:
    """Renders the sidebar and updates the dashboard context.

    Returns action flags from render() for the app to handle.
    """

    def __init__(self, context: DashboardContext, roster: Roster) -> None:
        self.ctx = context
        self.roster = roster

    def render(self, now: datetime | None = None) -> dict[str, bool]:
        """Render the sidebar.

        Returns:
            Action flags: {"reload_roster": bool}
        """
        actions = {"reload_roster": False}
        with st.sidebar:
            self._render_financial_year()
            actions["reload_roster"] = self._render_roster_source()
            st.divider()
            self._render_display_toggles()
            self._render_filters()
            st.divider()
            self._render_collector_list(now=now)
        return actions

    def _render_financial_year(self) -> None:
        years = self.roster.financial_years
        if not years:
            return
        ids = [fy.id for fy in years]
        current = self.ctx.filters.financial_year
        index = ids.index(current) if current in ids else 0
        chosen = st.selectbox(
            "Financial year",
            options=ids,
            index=index,
            format_func=lambda fy_id: self.roster.get_financial_year(fy_id).label,
            key="fy_select",
        )
        if chosen != current:
            logger.info(f"[ROSTER] Financial year {current} -> {chosen}")
            self.ctx.filters.financial_year = chosen

    def _render_roster_source(self) -> bool:
        path_text = st.text_input("Roster file", value=str(self.ctx.roster_path), key="roster_path")
        col_refresh, col_reload = st.columns(2)
        refresh = col_refresh.button("🔄 Refresh", use_container_width=True, help="Reload the roster file")
        if col_reload.button("🗺️ Reload map", use_container_width=True, help="Remount the map"):
            reload_map()
        if Path(path_text) != self.ctx.roster_path:
            self.ctx.roster_path = Path(path_text)
            return True
        return refresh

    def _render_display_toggles(self) -> None:
        show_clients = st.toggle("Show clients", value=self.ctx.display.show_clients, key="show_clients")
        self.ctx.display.show_clients = show_clients

    def _render_filters(self) -> None:
        self.ctx.filters.search = st.text_input(
            "Search collectors",
            value=self.ctx.filters.search,
            placeholder="Name or location",
            key="collector_search",
        )
        options = RosterConfig.STATUS_FILTERS
        current = self.ctx.filters.status
        self.ctx.filters.status = st.radio(
            "Status",
            options=options,
            index=options.index(current) if current in options else 0,
            format_func=lambda s: s.title(),
            horizontal=True,
            key="status_filter",
        )

    def _render_collector_list(self, now: datetime | None) -> None:
        collectors = self.roster.filter_collectors(search=self.ctx.filters.search, status=self.ctx.filters.status)
        st.markdown(f"**Field Collectors** ({len(collectors)})")
        if not collectors:
            st.caption("No collectors match the current filters")
        for collector in collectors:
            self._render_card(collector=collector, now=now)

    def _render_card(self, collector: Collector, now: datetime | None) -> None:
        is_selected = collector.id == self.ctx.selected_collector_id
        with st.container(border=True):
            emoji = StyleConfig.STATUS_EMOJIS[collector.status_enum.value]
            label = f"{emoji} {collector.name}" + (" ✔" if is_selected else "")
            if st.button(label, key=f"card_{collector.id}", use_container_width=True):
                self.ctx.toggle_collector(collector.id)
                trigger_rerun()
            lines = [f"📍 {collector.current_location.address or 'Unknown location'}"]
            if collector.current_task is not None:
                task = collector.current_task
                lines.append(f"🏢 {task.client.company_name} · {format_inr(task.amount_to_collect)}")
            lines.append(
                f"✅ {collector.tasks_completed} tasks · "
                f"🕒 {format_relative_time(collector.current_location.timestamp, now=now)}"
            )
            st.caption("  \n".join(lines))
