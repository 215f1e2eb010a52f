from ticketing.services.analytics_service import AnalyticsService
from ticketing.services.booking_service import BookingService
from ticketing.services.event_service import EventService
from ticketing.services.reconciliation_service import ReconciliationOutcome, ReconciliationService
from ticketing.stores import (
    DjangoAnalyticsStore,
    DjangoBookingLedger,
    DjangoEventStore,
    DjangoInventoryStore,
)

__all__ = [
    "AnalyticsService",
    "BookingService",
    "EventService",
    "ReconciliationOutcome",
    "ReconciliationService",
    "build_analytics_service",
    "build_booking_service",
    "build_reconciliation_service",
]


def build_booking_service() -> BookingService:
    return BookingService(
        inventory=DjangoInventoryStore(),
        ledger=DjangoBookingLedger(),
        events=DjangoEventStore(),
        analytics=DjangoAnalyticsStore(),
    )


def build_reconciliation_service() -> ReconciliationService:
    return ReconciliationService(
        ledger=DjangoBookingLedger(),
        analytics=DjangoAnalyticsStore(),
        events=EventService(DjangoEventStore()),
    )


def build_analytics_service() -> AnalyticsService:
    return AnalyticsService(
        store=DjangoAnalyticsStore(),
        ledger=DjangoBookingLedger(),
        events=EventService(DjangoEventStore()),
    )
