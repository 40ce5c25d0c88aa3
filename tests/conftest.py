"""Shared pytest fixtures for collector_tracker tests.

Provides the bundled sample roster and small builders for synthetic
collectors, so edge cases (invalid coordinates, empty history, shared
clients) can be set up without editing JSON.

SAMPLE ROSTER (collector_tracker/data/sample_roster.json):
    collector-1  active     3 history entries, current task task-1 (client-1)
    collector-2  traveling  2 history entries, current task task-3 (client-3)
    collector-3  idle       2 history entries, current task task-5 (client-5)
    collector-4  offline    1 history entry, no current task

All sample timestamps are on 2025-01-27 in IST. Tests pass NOW explicitly so
recency text in popups is deterministic.
"""

from datetime import datetime, timedelta, timezone

import pytest

from collector_tracker.constants import RosterConfig
from collector_tracker.model.client import Client
from collector_tracker.model.collector import Collector, LocationHistoryEntry
from collector_tracker.model.location import Coordinate, Location
from collector_tracker.model.roster import Roster, load_roster
from collector_tracker.model.task import Task
from collector_tracker.ui.map_surface import MapSurfaceController
from collector_tracker.ui.state_machine import DashboardContext

IST = timezone(timedelta(hours=5, minutes=30))

# Five minutes after the last sample position update
NOW = datetime(2025, 1, 27, 12, 5, tzinfo=IST)


# =============================================================================
# BUILDERS
# =============================================================================


def make_location(lat: float, lon: float, minute: int = 0, address: str | None = None) -> Location:
    """Location on the sample day at 11:mm IST."""
    return Location(
        coordinate=Coordinate(latitude=lat, longitude=lon),
        timestamp=datetime(2025, 1, 27, 11, minute, tzinfo=IST),
        address=address,
    )


def make_client(client_id: str = "client-x", lat: float = 23.03, lon: float = 72.55) -> Client:
    return Client(
        id=client_id,
        name="Test Contact",
        company_name=f"Company {client_id}",
        address="Test Road, Ahmedabad",
        location=make_location(lat=lat, lon=lon),
        outstanding_amount=50_000,
    )


def make_task(task_id: str, client: Client, assigned_to: str, status: str = "pending") -> Task:
    return Task(
        id=task_id,
        client=client,
        assigned_to=assigned_to,
        description="Collect invoice",
        amount_to_collect=50_000,
        amount_collected=0,
        status=status,
        created_at=datetime(2025, 1, 25, tzinfo=IST),
        financial_year="FY2024-25",
    )


def make_collector(
    collector_id: str,
    lat: float = 23.02,
    lon: float = 72.57,
    status: str = "active",
    history: list[LocationHistoryEntry] | None = None,
    task: Task | None = None,
) -> Collector:
    return Collector(
        id=collector_id,
        name=f"Collector {collector_id}",
        status=status,
        current_location=make_location(lat=lat, lon=lon, minute=50, address="Current spot"),
        location_history=history or [],
        current_task=task,
        total_collected=100_000,
        tasks_completed=3,
        financial_year="FY2024-25",
    )


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_roster() -> Roster:
    """The bundled four-collector roster."""
    return load_roster(RosterConfig.SAMPLE_ROSTER_PATH)


@pytest.fixture
def collectors(sample_roster: Roster) -> list[Collector]:
    return sample_roster.collectors


@pytest.fixture
def active_collector(sample_roster: Roster) -> Collector:
    """collector-1: active, three history entries, two client visits."""
    collector = sample_roster.get_collector("collector-1")
    assert collector is not None
    return collector


@pytest.fixture
def surface() -> MapSurfaceController:
    """Mounted map surface, disposed after the test."""
    controller = MapSurfaceController(name="test")
    controller.mount()
    yield controller
    controller.dispose()


@pytest.fixture
def ctx() -> DashboardContext:
    return DashboardContext()
