"""Integration tests for the booking and analytics endpoints.

Run with: pytest tests/test_api.py -v
"""

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from ticketing.models import Booking, Event, EventAnalytics, TicketType


@pytest.mark.django_db
class TestCreateBooking:
    """Tests for POST /api/bookings"""

    url = "/api/bookings"

    def test_creates_pending_booking(self, api_client: APIClient, booking_payload, ticket_type):
        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Booking created successfully"
        booking = Booking.objects.get(pk=body["bookingId"])
        assert booking.status == "PENDING"
        assert booking.user_email == "buyer@example.com"
        ticket_type.refresh_from_db()
        assert ticket_type.available_quantity == 3

    def test_route_is_named(self):
        assert reverse("booking-create") == self.url

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_non_positive_quantity(self, api_client, booking_payload, quantity):
        booking_payload["quantity"] = quantity

        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Quantity must be greater than 0"}
        assert Booking.objects.count() == 0

    def test_rejects_missing_fields(self, api_client, booking_payload):
        del booking_payload["userId"]

        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    def test_rejects_malformed_event_id(self, api_client, booking_payload):
        booking_payload["eventId"] = "not-a-uuid"

        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid eventId"

    def test_reports_remaining_inventory_on_conflict(self, api_client, booking_payload, ticket_type):
        TicketType.objects.filter(pk=ticket_type.pk).update(available_quantity=1)
        booking_payload["quantity"] = 3

        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Only 1 tickets available"}

    def test_unknown_event(self, api_client, booking_payload):
        booking_payload["eventId"] = str(uuid4())

        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 404
        assert response.json()["error"] == "Failed to create booking"

    def test_event_without_host_is_a_server_error(self, api_client, booking_payload, event):
        Event.objects.filter(pk=event.pk).update(host_uid="")

        response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to create booking"}
        assert Booking.objects.count() == 0

    def test_unexpected_errors_are_not_exposed(self, api_client, booking_payload):
        with patch("ticketing.handlers.views.build_booking_service") as build:
            build.return_value.create_pending_booking.side_effect = RuntimeError("disk on fire")
            response = api_client.post(self.url, booking_payload, format="json")

        assert response.status_code == 500
        assert "disk" not in response.json()["error"]


@pytest.mark.django_db
class TestUpdateBookingStatus:
    """Tests for PATCH /api/events/{event_id}/bookings/{booking_id}/status"""

    @pytest.fixture
    def booking_id(self, booking_service, make_request):
        return booking_service.create_pending_booking(make_request())

    def url(self, event_id, booking_id) -> str:
        return reverse("booking-status", kwargs={"event_id": event_id, "booking_id": booking_id})

    def test_confirms_booking_and_counts_it(
        self, api_client, event, booking_id, run_trigger_inline, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.patch(
                self.url(event.id, booking_id), {"status": "CONFIRMED"}, format="json"
            )

        assert response.status_code == 200
        assert response.json() == {"success": True, "bookingId": str(booking_id), "status": "CONFIRMED"}
        analytics = EventAnalytics.objects.get(pk=event.id)
        assert analytics.total_tickets_sold == 2
        assert analytics.total_revenue == Decimal("200.00")

    def test_unknown_booking(self, api_client, event):
        response = api_client.patch(self.url(event.id, uuid4()), {"status": "CONFIRMED"}, format="json")
        assert response.status_code == 404

    def test_malformed_booking_id(self, api_client, event):
        response = api_client.patch(self.url(event.id, "nope"), {"status": "CONFIRMED"}, format="json")
        assert response.status_code == 400

    def test_missing_status(self, api_client, event, booking_id):
        response = api_client.patch(self.url(event.id, booking_id), {}, format="json")

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"


@pytest.mark.django_db
class TestEventAnalyticsEndpoint:
    """Tests for GET /api/analytics/events/{event_id}"""

    def test_zeroed_analytics_before_any_sale(self, api_client, event):
        response = api_client.get(reverse("event-analytics", kwargs={"event_id": event.id}))

        assert response.status_code == 200
        body = response.json()
        assert body["eventName"] == "Summer Fest"
        assert body["hostId"] == "host-1"
        assert body["totalTicketsSold"] == 0
        assert body["ticketBreakdown"] == {}

    def test_breakdown_after_confirmed_sale(
        self, api_client, event, booking_service, make_request, run_trigger_inline,
        django_capture_on_commit_callbacks,
    ):
        with django_capture_on_commit_callbacks(execute=True):
            booking_id = booking_service.create_pending_booking(make_request(quantity=2))
        with django_capture_on_commit_callbacks(execute=True):
            booking_service.update_booking_status(str(event.id), str(booking_id), "CONFIRMED")

        body = api_client.get(reverse("event-analytics", kwargs={"event_id": event.id})).json()

        assert body["totalTicketsSold"] == 2
        assert Decimal(str(body["totalRevenue"])) == Decimal("200.00")
        assert body["ticketBreakdown"]["GA"]["soldCount"] == 2

    def test_unknown_event(self, api_client):
        response = api_client.get(reverse("event-analytics", kwargs={"event_id": uuid4()}))
        assert response.status_code == 404

    def test_malformed_event_id(self, api_client):
        response = api_client.get(reverse("event-analytics", kwargs={"event_id": "nope"}))
        assert response.status_code == 400


@pytest.mark.django_db
class TestHostAnalyticsEndpoint:
    """Tests for GET /api/analytics/hosts/{host_id}"""

    def test_unknown_host_has_empty_dashboard(self, api_client):
        response = api_client.get(reverse("host-analytics", kwargs={"host_id": "nobody"}))

        assert response.status_code == 200
        body = response.json()
        assert body["host"]["totalTicketsSold"] == 0
        assert body["events"] == []

    def test_lists_events_of_the_host(self, api_client, booking_payload):
        api_client.post("/api/bookings", booking_payload, format="json")

        body = api_client.get(reverse("host-analytics", kwargs={"host_id": "host-1"})).json()

        assert [e["eventName"] for e in body["events"]] == ["Summer Fest"]
        assert body["host"]["hostId"] == "host-1"
