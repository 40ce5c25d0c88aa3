"""Roster - a snapshot of collectors, clients and tasks.

The roster is read from a JSON document with top-level lists `clients`,
`tasks`, `collectors` and optionally `financialYears`. References are by id:
tasks point at clients (`clientId`), collectors at tasks (`currentTaskId`)
and history entries at clients (`clientVisitedId`).

Every snapshot is authoritative: the map reconciles to it in full.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from collector_tracker.model.client import Client
from collector_tracker.model.collector import Collector
from collector_tracker.model.financial_year import FINANCIAL_YEARS, FinancialYear
from collector_tracker.model.task import Task

logger = logging.getLogger(__name__)


class RosterLoadError(ValueError):
    """Raised when a roster document cannot be read or is malformed."""


@dataclass
class Roster:
    """Collectors plus the clients and tasks they reference.

    Attributes:
        collectors: Collectors in document order
        clients: Clients keyed by ID
        tasks: Tasks keyed by ID
        financial_years: Known financial years, most recent first
    """

    collectors: list[Collector] = field(default_factory=list)
    clients: dict[str, Client] = field(default_factory=dict)
    tasks: dict[str, Task] = field(default_factory=dict)
    financial_years: list[FinancialYear] = field(default_factory=lambda: list(FINANCIAL_YEARS))

    def get_collector(self, collector_id: str | None) -> Collector | None:
        """Find a collector by ID, or None."""
        if collector_id is None:
            return None
        for collector in self.collectors:
            if collector.id == collector_id:
                return collector
        return None

    def get_financial_year(self, fy_id: str) -> FinancialYear | None:
        for fy in self.financial_years:
            if fy.id == fy_id:
                return fy
        return None

    def filter_collectors(self, search: str = "", status: str = "all") -> list[Collector]:
        """Filter by case-insensitive name/address search and status.

        Args:
            search: Substring matched against name and current address
            status: "all" or a status value, matched against the normalised status

        Returns:
            Matching collectors in roster order.
        """
        needle = search.strip().lower()
        result = []
        for collector in self.collectors:
            address = (collector.current_location.address or "").lower()
            matches_search = not needle or needle in collector.name.lower() or needle in address
            matches_status = status == "all" or collector.status_enum.value == status
            if matches_search and matches_status:
                result.append(collector)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Roster":
        """Build a roster from a parsed JSON document.

        Raises:
            RosterLoadError: If records are missing fields or reference unknown IDs.
        """
        try:
            clients = {c["id"]: Client.from_dict(c) for c in data.get("clients", [])}
            tasks = {t["id"]: Task.from_dict(t, clients=clients) for t in data.get("tasks", [])}
            collectors = [Collector.from_dict(c, clients=clients, tasks=tasks) for c in data.get("collectors", [])]
            if "financialYears" in data:
                financial_years = [FinancialYear.from_dict(fy) for fy in data["financialYears"]]
            else:
                financial_years = list(FINANCIAL_YEARS)
        except (KeyError, TypeError, ValueError) as e:
            raise RosterLoadError(f"Malformed roster: {type(e).__name__}: {e}") from e

        logger.info(f"[ROSTER] Loaded {len(collectors)} collectors, {len(clients)} clients, {len(tasks)} tasks")
        return cls(
            collectors=collectors,
            clients=clients,
            tasks=tasks,
            financial_years=financial_years,
        )


def load_roster(path: Path | str) -> Roster:
    """Load a roster JSON file.

    Raises:
        RosterLoadError: If the file is missing, not JSON, or malformed.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise RosterLoadError(f"Cannot read roster file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RosterLoadError(f"Roster file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RosterLoadError(f"Roster file {path} must contain a JSON object")
    return Roster.from_dict(data)
