"""CollectionChart - Plotly chart of collections per collector.

Renders total collected per collector for the selected financial year, with
bars colored by collector status and the selected collector outlined.
"""

import logging
from typing import Sequence

import plotly.graph_objects as go

from collector_tracker.constants import ChartConfig, StyleConfig
from collector_tracker.core.formatting import format_inr
from collector_tracker.model.collector import Collector

logger = logging.getLogger(__name__)


class CollectionChart:
    """Renders a collection bar chart using Plotly.

    Example:
        chart = CollectionChart()
        fig = chart.render(collectors=collectors, financial_year="FY2024-25")
        st.plotly_chart(fig)
    """

    def __init__(self, height: int = ChartConfig.COLLECTION_CHART_HEIGHT) -> None:
        self.height = height

    def render(
        self,
        collectors: Sequence[Collector],
        financial_year: str,
        selected_id: str | None = None,
    ) -> go.Figure:
        """Render total collected per collector.

        Args:
            collectors: Collectors to plot (already scoped to the financial year)
            financial_year: Financial year ID for the title
            selected_id: Collector to outline, if any

        Returns:
            Plotly Figure object.
        """
        ordered = sorted(collectors, key=lambda c: c.total_collected, reverse=True)
        names = [c.name for c in ordered]
        totals = [c.total_collected for c in ordered]
        colors = [StyleConfig.STATUS_COLORS[c.status_enum.value] for c in ordered]
        outline = [3 if c.id == selected_id else 0 for c in ordered]

        fig = go.Figure(
            go.Bar(
                x=names,
                y=totals,
                marker=dict(color=colors, line=dict(color="#111827", width=outline)),
                text=[format_inr(t) for t in totals],
                textposition="outside",
                hovertext=[f"{c.name}<br>{c.status}<br>{c.tasks_completed} tasks completed" for c in ordered],
                hoverinfo="text",
            )
        )
        fig.update_layout(
            title=f"Collections by collector · {financial_year}",
            height=self.height,
            margin=dict(l=40, r=20, t=50, b=40),
            yaxis=dict(title="Collected (₹)", rangemode="tozero"),
            plot_bgcolor="white",
            showlegend=False,
        )
        logger.debug(f"[RENDER] Collection chart with {len(ordered)} bars")
        return fig
