from ticketing.stores.django_store import (
    DjangoAnalyticsStore,
    DjangoBookingLedger,
    DjangoEventStore,
    DjangoInventoryStore,
)
from ticketing.stores.interfaces import AnalyticsStore, BookingLedger, EventStore, InventoryStore

__all__ = [
    "AnalyticsStore",
    "BookingLedger",
    "EventStore",
    "InventoryStore",
    "DjangoAnalyticsStore",
    "DjangoBookingLedger",
    "DjangoEventStore",
    "DjangoInventoryStore",
]
