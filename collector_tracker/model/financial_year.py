"""FinancialYear - tenant accounting period (1 April to 31 March)."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class FinancialYear:
    """An accounting period used to scope tasks and statistics.

    Attributes:
        id: Identifier (e.g., "FY2024-25")
        label: Display label (e.g., "FY 2024-25")
        start_date: First day (inclusive)
        end_date: Last day (inclusive)
    """

    id: str
    label: str
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValueError(f"Financial year {self.id} ends before it starts")

    def contains(self, when: date | datetime) -> bool:
        """True if the given day falls inside this financial year."""
        day = when.date() if isinstance(when, datetime) else when
        return self.start_date <= day <= self.end_date

    @classmethod
    def starting(cls, year: int) -> "FinancialYear":
        """Build the Indian financial year that starts on 1 April of `year`."""
        suffix = f"{(year + 1) % 100:02d}"
        return cls(
            id=f"FY{year}-{suffix}",
            label=f"FY {year}-{suffix}",
            start_date=date(year, 4, 1),
            end_date=date(year + 1, 3, 31),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FinancialYear":
        return cls(
            id=data["id"],
            label=data["label"],
            start_date=date.fromisoformat(data["startDate"]),
            end_date=date.fromisoformat(data["endDate"]),
        )


# Most recent first, matching the year selector order
FINANCIAL_YEARS: list[FinancialYear] = [
    FinancialYear.starting(2024),
    FinancialYear.starting(2023),
    FinancialYear.starting(2022),
]
