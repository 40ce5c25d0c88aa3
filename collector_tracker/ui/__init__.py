"""User interface components for the collector tracker.

File Structure (layout-based naming):
- left_panel.py: Sidebar with financial year, filters and collector list
- center_map.py: Map session wiring (mount, reconcile, camera, clicks)
- right_panel.py: Legend, route history toggle, collector details
- bottom_chart.py: Plotly collections chart
- top_stats.py: Financial year summary tiles

Core Components:
- state_machine.py: MapLifecycle (3 states) + DashboardContext
- map_surface.py: MapSurfaceController, overlays and pydeck layers
- viewport.py: ViewportController (fit-all / center / fit-route)
- interaction.py: InteractionDispatcher (clicks, route toggle)
- popup_content.py: Popup markup per map object
- basemap.py: Satellite + labels style
"""

from collector_tracker.ui.bottom_chart import CollectionChart
from collector_tracker.ui.center_map import MapSession, dispose_map_session, render_center_map
from collector_tracker.ui.interaction import InteractionDispatcher
from collector_tracker.ui.left_panel import SidebarRenderer
from collector_tracker.ui.map_surface import MapSurfaceController, OverlaySet
from collector_tracker.ui.right_panel import render_right_panel
from collector_tracker.ui.state_machine import DashboardContext, MapLifecycle
from collector_tracker.ui.top_stats import render_summary_stats
from collector_tracker.ui.viewport import CameraMove, ViewportController

__all__ = [
    # Map
    "MapSurfaceController",
    "OverlaySet",
    "MapLifecycle",
    "ViewportController",
    "CameraMove",
    "InteractionDispatcher",
    # Session wiring
    "DashboardContext",
    "MapSession",
    "render_center_map",
    "dispose_map_session",
    # Panels
    "SidebarRenderer",
    "render_right_panel",
    "render_summary_stats",
    "CollectionChart",
]
