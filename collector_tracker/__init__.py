"""Collection Tracker - live field collector map and route history.

A Streamlit dashboard for field collection teams featuring:
- Satellite map with status-colored collector markers and client markers
- Route history reconstruction for the selected collector
- State machine-managed map lifecycle (mount, reconcile, dispose)
- Financial year collection statistics

Modules:
    core: Foundation (geo bounds, marker styles, route reconstruction, formatting)
    model: Data structures (Collector, Client, Task, Location, Roster)
    ui: Streamlit interface components (map surface, viewport, panels)

Example:
    from collector_tracker.model import load_roster
    from collector_tracker.core.route_reconstructor import reconstruct_route
    from collector_tracker.ui import MapSurfaceController
"""
