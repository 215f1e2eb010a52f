"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Self

from ticketing.domain.value_objects import BookingId, EventId, Money, TicketTypeKey

UNNAMED_EVENT = "Unnamed Event"


@dataclass(frozen=True)
class EventRecord:
    """Authoritative event metadata as the pipeline needs it."""

    id: EventId
    title: str
    date: str
    host_id: str | None


@dataclass(frozen=True)
class TicketInventory:
    """Domain representation of a TicketType inventory document."""

    key: TicketTypeKey
    name: str
    price: Money
    available_quantity: int
    sold_count: int


@dataclass(frozen=True)
class BookingRequest:
    """A purchase request as received from the client."""

    event_id: EventId
    venue_id: str
    show_id: str
    ticket_type_id: str
    ticket_type_name: str
    quantity: int
    price_per_ticket: Decimal
    total_price: Decimal
    user_id: str
    user_email: str = ""
    user_name: str = ""
    event_name: str = ""
    event_date: str = ""


@dataclass(frozen=True)
class Booking:
    """Domain representation of a ledger record."""

    id: BookingId
    event_id: EventId
    venue_id: str
    show_id: str
    ticket_type_id: str
    ticket_type_name: str
    quantity: int
    price_per_ticket: Money
    total_price: Money
    user_id: str
    status: str
    host_id: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class BookingSnapshot:
    """The fields of a booking the reconciliation trigger looks at.

    Snapshots cross the task queue, so they convert to and from plain dicts.
    """

    booking_id: str
    event_id: str
    status: str
    quantity: int
    price_per_ticket: Decimal
    ticket_type_name: str
    host_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "event_id": self.event_id,
            "status": self.status,
            "quantity": self.quantity,
            "price_per_ticket": str(self.price_per_ticket),
            "ticket_type_name": self.ticket_type_name,
            "host_id": self.host_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            booking_id=str(data["booking_id"]),
            event_id=str(data["event_id"]),
            status=data.get("status") or "",
            quantity=int(data.get("quantity") or 0),
            price_per_ticket=Decimal(str(data.get("price_per_ticket") or "0")),
            ticket_type_name=data.get("ticket_type_name") or "",
            host_id=data.get("host_id") or None,
        )


@dataclass(frozen=True)
class AnalyticsDelta:
    """One confirmed booking's contribution to every analytics view.

    Host revenue is ticket price times quantity, never the buyer-facing
    charged total.
    """

    tickets: int
    revenue: Decimal
    ticket_type_name: str

    @classmethod
    def for_booking(cls, price_per_ticket: Decimal, quantity: int, ticket_type_name: str) -> Self:
        return cls(
            tickets=quantity,
            revenue=(Money(price_per_ticket) * quantity).amount,
            ticket_type_name=ticket_type_name,
        )


@dataclass(frozen=True)
class TicketBreakdown:
    """Per-ticket-type slice of an event's analytics."""

    sold_count: int
    revenue: Decimal


@dataclass(frozen=True)
class EventAnalytics:
    """Domain representation of an event_analytics document."""

    event_id: EventId
    event_name: str
    event_date: str
    host_id: str
    total_tickets_sold: int
    total_revenue: Decimal
    ticket_breakdown: dict[str, TicketBreakdown] = field(default_factory=dict)
    updated_at: datetime | None = None


@dataclass(frozen=True)
class HostAnalytics:
    """Domain representation of a host_analytics document."""

    host_id: str
    total_tickets_sold: int
    total_revenue: Decimal
    updated_at: datetime | None = None


@dataclass(frozen=True)
class HostDashboard:
    """Host totals plus the per-event analytics behind them."""

    host: HostAnalytics
    events: tuple[EventAnalytics, ...] = ()


@dataclass(frozen=True)
class AnalyticsDrift:
    """A counter that disagrees with what it should be derived from."""

    scope: str
    key: str
    counter: str
    expected: Decimal | int
    actual: Decimal | int
