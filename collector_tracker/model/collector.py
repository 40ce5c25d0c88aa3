"""Collector - a field agent tracked on the map.

A Collector carries its most recent position (current_location), an ordered
location history (oldest first, excluding current_location), and at most one
active task. The roster is owned by the external data source: nothing in this
package mutates a Collector after it has been loaded.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from collector_tracker.constants import COLLECTOR_STATUSES, StyleConfig
from collector_tracker.model.client import Client
from collector_tracker.model.location import Location
from collector_tracker.model.task import Task

logger = logging.getLogger(__name__)


class CollectorStatus(Enum):
    """Closed set of collector statuses."""

    ACTIVE = "active"
    TRAVELING = "traveling"
    OFFLINE = "offline"
    IDLE = "idle"

    @classmethod
    def parse(cls, value: Any) -> "CollectorStatus":
        """Map a raw status value to the enum, falling back to IDLE.

        Backend drift (new or misspelled statuses) must never break rendering.
        """
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown collector status {value!r}, using {StyleConfig.DEFAULT_STATUS}")
            return cls(StyleConfig.DEFAULT_STATUS)


assert [s.value for s in CollectorStatus] == COLLECTOR_STATUSES


@dataclass(frozen=True)
class LocationHistoryEntry:
    """One tracked point in a collector's history.

    Attributes:
        location: Where and when
        duration_minutes: Time spent there (>= 0)
        client_visited: Client visited at this point, if any
    """

    location: Location
    duration_minutes: float = 0.0
    client_visited: Client | None = None

    def __post_init__(self) -> None:
        if self.duration_minutes < 0:
            raise ValueError(f"History entry cannot have negative duration {self.duration_minutes}")

    @property
    def has_client_visit(self) -> bool:
        return self.client_visited is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any], clients: dict[str, Client]) -> "LocationHistoryEntry":
        """Create entry from a roster record ({location, duration, clientVisitedId?})."""
        client_id = data.get("clientVisitedId")
        if client_id is not None and client_id not in clients:
            raise ValueError(f"History entry references unknown client {client_id!r}")
        return cls(
            location=Location.from_dict(data["location"]),
            duration_minutes=float(data.get("duration", 0.0)),
            client_visited=clients[client_id] if client_id is not None else None,
        )


@dataclass
class Collector:
    """A field agent with live position, history and current task.

    Attributes:
        id: Unique identifier (e.g., "collector-1")
        name: Display name
        phone: Contact phone
        email: Contact email
        status: Raw status string as delivered by the backend
        current_location: Most recent position
        location_history: Chronological history, oldest first
        current_task: At most one active task
        total_collected: Cumulative rupees collected
        tasks_completed: Count of completed tasks
        financial_year: Financial year tag (e.g., "FY2024-25")
    """

    id: str
    name: str
    status: str
    current_location: Location
    location_history: list[LocationHistoryEntry] = field(default_factory=list)
    current_task: Task | None = None
    phone: str = ""
    email: str = ""
    total_collected: float = 0.0
    tasks_completed: int = 0
    financial_year: str = ""

    @property
    def status_enum(self) -> CollectorStatus:
        """Status normalised to the closed enumeration (unknown -> IDLE)."""
        return CollectorStatus.parse(self.status)

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper()

    @property
    def is_online(self) -> bool:
        """Active or traveling collectors count as online."""
        return self.status_enum in (CollectorStatus.ACTIVE, CollectorStatus.TRAVELING)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        clients: dict[str, Client],
        tasks: dict[str, Task],
    ) -> "Collector":
        """Create Collector from a roster record, resolving client and task references."""
        task_id = data.get("currentTaskId")
        if task_id is not None and task_id not in tasks:
            raise ValueError(f"Collector {data.get('id')} references unknown task {task_id!r}")
        status = data.get("status", StyleConfig.DEFAULT_STATUS)
        if not isinstance(status, str):
            logger.warning(f"Collector {data.get('id')} has status {status!r}, using {StyleConfig.DEFAULT_STATUS}")
            status = StyleConfig.DEFAULT_STATUS
        return cls(
            id=data["id"],
            name=data["name"],
            status=status,
            current_location=Location.from_dict(data["currentLocation"]),
            location_history=[
                LocationHistoryEntry.from_dict(entry, clients=clients) for entry in data.get("locationHistory", [])
            ],
            current_task=tasks[task_id] if task_id is not None else None,
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            total_collected=float(data.get("totalCollected", 0.0)),
            tasks_completed=int(data.get("tasksCompleted", 0)),
            financial_year=data.get("financialYear", ""),
        )

    def __repr__(self) -> str:
        return f"Collector({self.id}, {self.name!r}, {self.status}, history={len(self.location_history)})"
