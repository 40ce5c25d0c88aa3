"""Summary statistics over a roster, scoped to one financial year."""

from dataclasses import dataclass

from collector_tracker.model.collector import Collector
from collector_tracker.model.roster import Roster
from collector_tracker.model.task import TaskStatus


@dataclass(frozen=True)
class SummaryStats:
    """Header figures for the dashboard.

    Attributes:
        total_collectors: Collectors tagged with the financial year
        active_collectors: Of those, active or traveling
        total_collected: Sum of the collectors' cumulative totals
        pending_collection: Sum of remaining amounts over non-completed tasks
        completed_tasks: Tasks with status completed
        pending_tasks: Tasks pending or in progress
    """

    total_collectors: int
    active_collectors: int
    total_collected: float
    pending_collection: float
    completed_tasks: int
    pending_tasks: int

    @property
    def online_percent(self) -> int:
        """Share of collectors currently online, rounded to a whole percent."""
        if self.total_collectors == 0:
            return 0
        return round(100 * self.active_collectors / self.total_collectors)


def collectors_in_year(roster: Roster, financial_year: str) -> list[Collector]:
    return [c for c in roster.collectors if c.financial_year == financial_year]


def compute_summary(roster: Roster, financial_year: str) -> SummaryStats:
    """Aggregate collectors and tasks tagged with the given financial year ID.

    Failed tasks count toward pending collection but not toward pending tasks.
    """
    collectors = collectors_in_year(roster=roster, financial_year=financial_year)
    tasks = [t for t in roster.tasks.values() if t.financial_year == financial_year]

    return SummaryStats(
        total_collectors=len(collectors),
        active_collectors=sum(1 for c in collectors if c.is_online),
        total_collected=sum(c.total_collected for c in collectors),
        pending_collection=sum(t.amount_remaining for t in tasks if t.status != TaskStatus.COMPLETED),
        completed_tasks=sum(1 for t in tasks if t.is_completed),
        pending_tasks=sum(1 for t in tasks if t.is_open),
    )
