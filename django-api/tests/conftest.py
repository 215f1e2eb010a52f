"""Pytest configuration and shared fixtures."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from ticketing.domain import BookingRequest, BookingSnapshot, EventId
from ticketing.models import Event, TicketType
from ticketing.services import (
    build_analytics_service,
    build_booking_service,
    build_reconciliation_service,
)
from ticketing.tasks import reconcile_booking_analytics


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def event(db) -> Event:
    return Event.objects.create(title="Summer Fest", date="2026-07-01", host_uid="host-1")


@pytest.fixture
def ticket_type(event) -> TicketType:
    return TicketType.objects.create(
        event=event,
        venue_id="venue-1",
        show_id="show-1",
        name="GA",
        price=Decimal("100.00"),
        available_quantity=5,
    )


@pytest.fixture
def make_request(event, ticket_type):
    """Build a BookingRequest for the default ticket type."""

    def _make(**overrides) -> BookingRequest:
        fields = {
            "event_id": EventId(event.id),
            "venue_id": ticket_type.venue_id,
            "show_id": ticket_type.show_id,
            "ticket_type_id": str(ticket_type.id),
            "ticket_type_name": ticket_type.name,
            "quantity": 2,
            "price_per_ticket": Decimal("100.00"),
            "total_price": Decimal("200.00"),
            "user_id": "user-1",
            "user_email": "buyer@example.com",
            "user_name": "Buyer",
        }
        fields.update(overrides)
        return BookingRequest(**fields)

    return _make


@pytest.fixture
def booking_payload(event, ticket_type) -> dict:
    return {
        "eventId": str(event.id),
        "eventName": "Summer Fest",
        "eventDate": "2026-07-01",
        "venueId": ticket_type.venue_id,
        "showId": ticket_type.show_id,
        "ticketTypeId": str(ticket_type.id),
        "ticketTypeName": ticket_type.name,
        "quantity": 2,
        "pricePerTicket": "100.00",
        "totalPrice": "200.00",
        "userId": "user-1",
        "userEmail": "buyer@example.com",
        "userName": "Buyer",
    }


@pytest.fixture
def booking_service():
    return build_booking_service()


@pytest.fixture
def reconciliation_service():
    return build_reconciliation_service()


@pytest.fixture
def analytics_service():
    return build_analytics_service()


@pytest.fixture
def snapshot():
    """Build a BookingSnapshot from a Booking row with a different status."""

    def _make(booking, status: str, **overrides) -> BookingSnapshot:
        fields = {
            "booking_id": str(booking.pk),
            "event_id": str(booking.event_id),
            "status": status,
            "quantity": booking.quantity,
            "price_per_ticket": Decimal(booking.price_per_ticket),
            "ticket_type_name": booking.ticket_type_name,
            "host_id": booking.host_id or None,
        }
        fields.update(overrides)
        return BookingSnapshot(**fields)

    return _make


@pytest.fixture
def run_trigger_inline():
    """Run the reconciliation task in-process instead of queueing it."""
    with patch.object(
        reconcile_booking_analytics,
        "delay",
        side_effect=lambda before, after: reconcile_booking_analytics(before, after),
    ) as delay:
        yield delay
