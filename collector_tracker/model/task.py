"""Task - a collection assignment for one client.

Completed tasks are NOT required to have amount_collected equal to
amount_to_collect: partial settlements can be marked completed.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from collector_tracker.constants import TASK_STATUSES
from collector_tracker.model.client import Client
from collector_tracker.model.location import parse_timestamp


class TaskStatus:
    """Task lifecycle values."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"

    assert [PENDING, IN_PROGRESS, COMPLETED, FAILED] == TASK_STATUSES

    # Tasks still waiting on money (counted as pending work)
    OPEN = [PENDING, IN_PROGRESS]


@dataclass
class Task:
    """A collection task assigned to a collector.

    Attributes:
        id: Unique identifier (e.g., "task-1")
        client: Client to collect from
        assigned_to: Collector ID
        description: Free text
        amount_to_collect: Rupees due (>= 0)
        amount_collected: Rupees received so far (>= 0)
        status: One of TaskStatus values
        created_at: Creation instant
        completed_at: Completion instant, if completed
        financial_year: Financial year ID (e.g., "FY2024-25")
    """

    id: str
    client: Client
    assigned_to: str
    description: str
    amount_to_collect: float
    amount_collected: float
    status: str
    created_at: datetime
    completed_at: datetime | None = None
    financial_year: str = ""

    def __post_init__(self) -> None:
        if self.amount_to_collect < 0:
            raise ValueError(f"Task {self.id} has negative amount_to_collect {self.amount_to_collect}")
        if self.amount_collected < 0:
            raise ValueError(f"Task {self.id} has negative amount_collected {self.amount_collected}")
        if self.status not in TASK_STATUSES:
            raise ValueError(f"Task {self.id} has unknown status {self.status!r}")

    @property
    def client_id(self) -> str:
        return self.client.id

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_open(self) -> bool:
        """True for pending or in-progress tasks."""
        return self.status in TaskStatus.OPEN

    @property
    def amount_remaining(self) -> float:
        """Rupees still to collect (may be negative on overpayment)."""
        return self.amount_to_collect - self.amount_collected

    @classmethod
    def from_dict(cls, data: dict[str, Any], clients: dict[str, Client]) -> "Task":
        """Create Task from a roster record, resolving clientId against known clients."""
        client_id = data["clientId"]
        if client_id not in clients:
            raise ValueError(f"Task {data.get('id')} references unknown client {client_id!r}")
        completed_at = data.get("completedAt")
        return cls(
            id=data["id"],
            client=clients[client_id],
            assigned_to=data["assignedTo"],
            description=data.get("description", ""),
            amount_to_collect=float(data["amountToCollect"]),
            amount_collected=float(data.get("amountCollected", 0.0)),
            status=data["status"],
            created_at=parse_timestamp(data["createdAt"]),
            completed_at=parse_timestamp(completed_at) if completed_at else None,
            financial_year=data.get("financialYear", ""),
        )

    def __repr__(self) -> str:
        return f"Task({self.id}, {self.status}, client={self.client.id})"
