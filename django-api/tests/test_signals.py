"""Tests for the booking write trigger.

Run with: pytest tests/test_signals.py -v
"""

from decimal import Decimal
from unittest.mock import patch

import pytest

from ticketing.models import Booking, EventAnalytics, HostAnalytics
from ticketing.tasks import reconcile_booking_analytics


@pytest.fixture
def queued():
    with patch.object(reconcile_booking_analytics, "delay") as delay:
        yield delay


@pytest.mark.django_db
class TestBookingTrigger:
    def test_nothing_is_queued_before_commit(self, queued, booking_service, make_request):
        booking_service.create_pending_booking(make_request())
        queued.assert_not_called()

    def test_create_queues_snapshot_without_before(
        self, queued, booking_service, make_request, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            booking_id = booking_service.create_pending_booking(make_request())

        queued.assert_called_once()
        before, after = queued.call_args.args
        assert before is None
        assert after["booking_id"] == str(booking_id)
        assert after["status"] == "PENDING"
        assert after["host_id"] == "host-1"
        assert after["price_per_ticket"] == "100.00"

    def test_status_change_queues_stored_previous_state(
        self, queued, booking_service, make_request, event, django_capture_on_commit_callbacks
    ):
        booking_id = booking_service.create_pending_booking(make_request())

        with django_capture_on_commit_callbacks(execute=True):
            booking_service.update_booking_status(str(event.id), str(booking_id), "CONFIRMED")

        before, after = queued.call_args.args
        assert before["status"] == "PENDING"
        assert after["status"] == "CONFIRMED"

    def test_delete_queues_before_only(
        self, queued, booking_service, make_request, django_capture_on_commit_callbacks
    ):
        booking_id = booking_service.create_pending_booking(make_request())

        with django_capture_on_commit_callbacks(execute=True):
            Booking.objects.get(pk=booking_id.value).delete()

        before, after = queued.call_args.args
        assert before["booking_id"] == str(booking_id)
        assert after is None


@pytest.mark.django_db
class TestEndToEnd:
    def test_confirmed_booking_is_counted_once(
        self, run_trigger_inline, booking_service, make_request, event, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            booking_id = booking_service.create_pending_booking(make_request(quantity=2))
        with django_capture_on_commit_callbacks(execute=True):
            booking_service.update_booking_status(str(event.id), str(booking_id), "CONFIRMED")

        booking = Booking.objects.get(pk=booking_id.value)
        with django_capture_on_commit_callbacks(execute=True):
            booking.user_name = "Renamed"
            booking.save()

        analytics = EventAnalytics.objects.get(pk=event.id)
        assert (analytics.total_tickets_sold, analytics.total_revenue) == (2, Decimal("200.00"))
        assert HostAnalytics.objects.get(pk="host-1").total_revenue == Decimal("200.00")
        assert run_trigger_inline.call_count == 3
        assert Booking.objects.get(pk=booking_id.value).analytics_counted_at is not None

    def test_pending_booking_is_not_counted(
        self, run_trigger_inline, booking_service, make_request, event, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            booking_service.create_pending_booking(make_request())

        assert EventAnalytics.objects.get(pk=event.id).total_tickets_sold == 0
