"""Client - a business the collectors visit to collect payments.

Clients are owned by the tenant. Tasks and location history entries
reference them; they never own them.
"""

from dataclasses import dataclass
from typing import Any

from collector_tracker.model.location import Location


@dataclass
class Client:
    """A client with a fixed place of business.

    Attributes:
        id: Unique identifier (e.g., "client-1")
        name: Contact person
        company_name: Business name shown on the map
        address: Postal address
        location: Where the business is
        phone: Contact phone
        email: Contact email
        outstanding_amount: Amount owed in rupees (non-negative)
    """

    id: str
    name: str
    company_name: str
    address: str
    location: Location
    phone: str = ""
    email: str = ""
    outstanding_amount: float = 0.0

    def __post_init__(self) -> None:
        if self.outstanding_amount < 0:
            raise ValueError(f"Client {self.id} cannot have negative outstanding amount {self.outstanding_amount}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Client":
        """Create Client from a roster record."""
        return cls(
            id=data["id"],
            name=data["name"],
            company_name=data["companyName"],
            address=data.get("address", ""),
            location=Location.from_dict(data["location"]),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            outstanding_amount=float(data.get("outstandingAmount", 0.0)),
        )

    def __repr__(self) -> str:
        return f"Client({self.id}, {self.company_name!r})"
