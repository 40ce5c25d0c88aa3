"""Data model classes for the collector tracker.

- Coordinate / Location: Geometry atoms (lat, lon, timestamp, address)
- Client: Business visited for collections
- Task: Collection assignment for one client
- Collector: Field agent with live position, history and current task
- LocationHistoryEntry: One tracked point in a collector's history
- FinancialYear: Accounting period scoping tasks and statistics
- Roster: Snapshot of collectors, clients and tasks loaded from JSON
"""

from collector_tracker.model.client import Client
from collector_tracker.model.collector import (
    Collector,
    CollectorStatus,
    LocationHistoryEntry,
)
from collector_tracker.model.financial_year import FINANCIAL_YEARS, FinancialYear
from collector_tracker.model.location import Coordinate, Location
from collector_tracker.model.roster import Roster, RosterLoadError, load_roster
from collector_tracker.model.task import Task, TaskStatus

__all__ = [
    "Coordinate",
    "Location",
    "Client",
    "Task",
    "TaskStatus",
    "Collector",
    "CollectorStatus",
    "LocationHistoryEntry",
    "FinancialYear",
    "FINANCIAL_YEARS",
    "Roster",
    "RosterLoadError",
    "load_roster",
]
