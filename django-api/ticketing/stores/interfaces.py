"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Methods that write
must be called inside the caller's atomic block; they never open one of
their own unless stated.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from ticketing.domain import (
    AnalyticsDelta,
    Booking,
    BookingId,
    BookingRequest,
    EventAnalytics,
    EventId,
    EventRecord,
    HostAnalytics,
    TicketInventory,
    TicketTypeKey,
)


class EventStore(ABC):
    """Read access to authoritative event metadata."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> EventRecord | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def increment_tickets_sold(self, event_id: EventId, tickets: int) -> None:
        """Bump the denormalized ``tickets_sold`` mirrors on the event."""
        ...

    @abstractmethod
    def get_tickets_sold(self, event_id: EventId) -> int | None:
        """Return the event's ``tickets_sold`` mirror, read uncached."""
        ...


class InventoryStore(ABC):
    """Ticket type inventory. Mutated only by the booking transaction."""

    @abstractmethod
    def lock_ticket_type(self, key: TicketTypeKey) -> TicketInventory | None:
        """Return the inventory row, locked until the surrounding transaction ends."""
        ...

    @abstractmethod
    def reserve(self, key: TicketTypeKey, quantity: int) -> bool:
        """Move ``quantity`` tickets from available to sold.

        Returns False, changing nothing, if fewer than ``quantity`` remain.
        """
        ...


class BookingLedger(ABC):
    """Append-only booking records."""

    @abstractmethod
    def create_booking(self, request: BookingRequest, status: str, host_id: str) -> Booking:
        """Append a booking and return it."""
        ...

    @abstractmethod
    def get_booking(self, event_id: EventId, booking_id: BookingId) -> Booking | None:
        """Return a booking scoped to its event, or None if not found."""
        ...

    @abstractmethod
    def set_status(self, event_id: EventId, booking_id: BookingId, status: str) -> Booking | None:
        """Change a booking's status, or return None if it does not exist."""
        ...

    @abstractmethod
    def claim_for_analytics(self, booking_id: BookingId) -> bool:
        """Mark the booking as counted. Returns False if it already was."""
        ...

    @abstractmethod
    def confirmed_totals(self, event_id: EventId) -> tuple[int, Decimal]:
        """Return (tickets, revenue) over confirmed-equivalent bookings of an event."""
        ...

    @abstractmethod
    def uncounted_confirmed_bookings(self, event_id: EventId | None = None) -> list[BookingId]:
        """Return confirmed-equivalent bookings the analytics trigger has not counted."""
        ...


class AnalyticsStore(ABC):
    """Event and host analytics documents. Counters are increment-only."""

    @abstractmethod
    def ensure_documents(self, event: EventRecord, host_id: str) -> None:
        """Create both analytics documents if missing and stamp event metadata."""
        ...

    @abstractmethod
    def apply(
        self,
        event_id: EventId,
        host_id: str,
        delta: AnalyticsDelta,
        event: EventRecord | None = None,
    ) -> None:
        """Add ``delta`` to the event, breakdown and host counters."""
        ...

    @abstractmethod
    def get_event_analytics(self, event_id: EventId) -> EventAnalytics | None:
        """Return an event's analytics, or None if nothing was recorded yet."""
        ...

    @abstractmethod
    def list_event_analytics(self, host_id: str | None = None) -> list[EventAnalytics]:
        """Return event analytics, optionally only those of one host."""
        ...

    @abstractmethod
    def get_host_analytics(self, host_id: str) -> HostAnalytics | None:
        """Return a host's rollup, or None if nothing was recorded yet."""
        ...

    @abstractmethod
    def list_host_analytics(self) -> list[HostAnalytics]:
        """Return every host rollup."""
        ...

    @abstractmethod
    def update_event_metadata(self, event_id: EventId, event_name: str, event_date: str) -> None:
        """Overwrite the cached name/date on an event's analytics."""
        ...
