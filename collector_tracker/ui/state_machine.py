"""State for the tracker UI.

Uses python-statemachine for the map surface lifecycle:

States (3 states, linear):
    UNINITIALIZED: Controller exists but no surface has been built
    READY: Surface and persistent tile layers exist, reconcile allowed
    DISPOSED: Surface and overlays released (final)

Transitions:
    UNINITIALIZED -> READY: mount (exactly once)
    READY -> DISPOSED: dispose (exactly once)

Anything else (mount twice, dispose before mount, dispose twice) is not
allowed by the machine. MapLifecycle.try_transition() turns those into a
logged False instead of an exception so that UI teardown stays safe.

DashboardContext holds the host-view state that the map reads but never
owns: selection, display toggles, roster filters and financial year. It
lives in st.session_state across Streamlit reruns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from collector_tracker.constants import MapConfig, RosterConfig

logger = logging.getLogger(__name__)

# (lat, lon) order for map center
LatLon = tuple[float, float]


class LifecycleLogListener:
    """Logs every lifecycle transition.

    Usage:
        lifecycle = MapLifecycle()
        lifecycle.add_listener(LifecycleLogListener(name="main"))
    """

    def __init__(self, name: str = "map") -> None:
        self.name = name

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[MAP] {self.name}: {source.name} --({event})--> {target.name}")


class MapLifecycle(StateMachine):
    """Uninitialized -> Ready -> Disposed lifecycle of one map surface."""

    uninitialized = State("Uninitialized", initial=True)
    ready = State("Ready")
    disposed = State("Disposed", final=True)

    mount = uninitialized.to(ready)
    dispose = ready.to(disposed)

    @property
    def is_uninitialized(self) -> bool:
        return self.uninitialized.is_active

    @property
    def is_ready(self) -> bool:
        return self.ready.is_active

    @property
    def is_disposed(self) -> bool:
        return self.disposed.is_active

    def get_state_name(self) -> str:
        return self.current_state.name

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name ("mount" or "dispose")
            **kwargs: Arguments for transition

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"[MAP] Transition '{event}' not allowed from {self.get_state_name()}")
            return False

    def __repr__(self) -> str:
        return f"MapLifecycle(state={self.get_state_name()})"

    @staticmethod
    def create(name: str = "map", add_log_listener: bool = True) -> "MapLifecycle":
        """Factory method to create a lifecycle with optional logging listener.

        Args:
            name: Label used in log lines
            add_log_listener: If True, every transition is logged at INFO.

        Returns:
            MapLifecycle in the uninitialized state.
        """
        lifecycle = MapLifecycle()
        if add_log_listener:
            lifecycle.add_listener(LifecycleLogListener(name=name))
        return lifecycle


@dataclass
class SelectionContext:
    """At most one selected collector."""

    collector_id: str | None = None

    def has_selection(self) -> bool:
        return self.collector_id is not None

    def clear(self) -> None:
        self.collector_id = None


@dataclass
class DisplayContext:
    """Map overlay toggles owned by the host view.

    The route history toggle is not here: it belongs to the mounted map
    (InteractionDispatcher) and resets when the map is remounted.
    """

    show_clients: bool = True


@dataclass
class FilterContext:
    """Roster filters applied before the map reconciles."""

    search: str = ""
    status: str = "all"
    financial_year: str = RosterConfig.DEFAULT_FINANCIAL_YEAR

    def clear(self) -> None:
        self.search = ""
        self.status = "all"


@dataclass
class MapContext:
    """Last camera applied to the map."""

    center: LatLon = (MapConfig.START_CENTER_LAT, MapConfig.START_CENTER_LON)
    zoom: float = MapConfig.DEFAULT_ZOOM


@dataclass
class UIMessagesContext:
    """User-facing messages and errors."""

    message: str = ""
    error: str = ""

    def clear(self) -> None:
        self.message = ""
        self.error = ""


@dataclass
class DashboardContext:
    """Host-view state shared across reruns.

    Sub-contexts:
        selection: Selected collector
        display: Client marker toggle
        filters: Search, status filter, financial year
        map: Last applied camera
        messages: User-facing messages/errors
    """

    roster_path: Path = RosterConfig.SAMPLE_ROSTER_PATH
    selection: SelectionContext = field(default_factory=SelectionContext)
    display: DisplayContext = field(default_factory=DisplayContext)
    filters: FilterContext = field(default_factory=FilterContext)
    map: MapContext = field(default_factory=MapContext)
    messages: UIMessagesContext = field(default_factory=UIMessagesContext)

    @property
    def selected_collector_id(self) -> str | None:
        return self.selection.collector_id

    def select_collector(self, collector_id: str | None) -> None:
        self.selection.collector_id = collector_id
        logger.info(f"[CLICK] Selection -> {collector_id}")

    def toggle_collector(self, collector_id: str) -> None:
        """Select a collector, or deselect it if it is already selected."""
        if self.selection.collector_id == collector_id:
            self.select_collector(None)
        else:
            self.select_collector(collector_id)

    def clear_selection(self) -> None:
        self.select_collector(None)

    def __repr__(self) -> str:
        return (
            f"DashboardContext(selected={self.selection.collector_id}, "
            f"clients={self.display.show_clients}, "
            f"fy={self.filters.financial_year})"
        )
