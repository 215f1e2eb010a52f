from ticketing.domain.models import (
    AnalyticsDelta,
    Booking,
    BookingRequest,
    BookingSnapshot,
    EventAnalytics,
    EventRecord,
    HostAnalytics,
    TicketBreakdown,
    TicketInventory,
)
from ticketing.domain.value_objects import BookingId, EventId, Money, Quantity, TicketTypeKey

__all__ = [
    "AnalyticsDelta",
    "Booking",
    "BookingRequest",
    "BookingSnapshot",
    "EventAnalytics",
    "EventRecord",
    "HostAnalytics",
    "TicketBreakdown",
    "TicketInventory",
    "BookingId",
    "EventId",
    "Money",
    "Quantity",
    "TicketTypeKey",
]
