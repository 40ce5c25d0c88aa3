"""Summary header - financial year figures above the map."""

import streamlit as st

from collector_tracker.core.formatting import format_inr_compact
from collector_tracker.core.statistics import SummaryStats


def render_summary_stats(stats: SummaryStats) -> None:
    """Four metric tiles: collectors, collected, pending, tasks."""
    col_team, col_collected, col_pending, col_tasks = st.columns(4)
    col_team.metric(
        "Active Collectors",
        f"{stats.active_collectors}/{stats.total_collectors}",
        help=f"{stats.online_percent}% online",
    )
    col_collected.metric("Total Collected", format_inr_compact(stats.total_collected))
    col_pending.metric("Pending Collection", format_inr_compact(stats.pending_collection))
    col_tasks.metric(
        "Tasks",
        f"{stats.completed_tasks} done",
        help=f"{stats.pending_tasks} pending or in progress",
    )
