"""Tests for counter columns on the persistence models.

Run with: pytest tests/test_models.py -v
"""

from decimal import Decimal

import pytest
from django.contrib.admin.sites import AdminSite

from ticketing.admin import TicketTypeAdmin, TicketTypeForm
from ticketing.models import (
    Booking,
    Event,
    EventAnalytics,
    HostAnalytics,
    TicketBreakdownEntry,
    TicketType,
)


@pytest.mark.django_db
class TestStaleSavesKeepCounters:
    def test_ticket_type_edit_does_not_resell_tickets(self, booking_service, make_request, ticket_type):
        stale = TicketType.objects.get(pk=ticket_type.pk)
        booking_service.create_pending_booking(make_request(quantity=3))

        stale.price = Decimal("120.00")
        stale.save()

        ticket_type.refresh_from_db()
        assert ticket_type.price == Decimal("120.00")
        assert (ticket_type.available_quantity, ticket_type.sold_count) == (2, 3)

    def test_explicit_update_fields_cannot_write_inventory(self, ticket_type):
        ticket_type.available_quantity = 50
        ticket_type.save(update_fields=["available_quantity"])

        ticket_type.refresh_from_db()
        assert ticket_type.available_quantity == 5

    def test_insert_writes_initial_inventory(self, event):
        created = TicketType.objects.create(
            event=event, venue_id="v", show_id="s", name="VIP", price=Decimal("50"), available_quantity=7
        )
        created.refresh_from_db()
        assert created.available_quantity == 7

    def test_event_edit_keeps_sold_mirror(
        self, booking_service, make_request, event, run_trigger_inline, django_capture_on_commit_callbacks
    ):
        stale = Event.objects.get(pk=event.pk)
        with django_capture_on_commit_callbacks(execute=True):
            booking_id = booking_service.create_pending_booking(make_request(quantity=2))
        with django_capture_on_commit_callbacks(execute=True):
            booking_service.update_booking_status(str(event.id), str(booking_id), "CONFIRMED")

        stale.title = "Renamed"
        stale.save()

        event.refresh_from_db()
        assert event.title == "Renamed"
        assert event.tickets_sold == event.total_tickets_sold == 2

    def test_analytics_edits_keep_counters(self, event):
        analytics = EventAnalytics.objects.create(event=event, host_id="host-1")
        entry = TicketBreakdownEntry.objects.create(analytics=analytics, ticket_type_name="GA")
        host = HostAnalytics.objects.create(host_id="host-1")
        EventAnalytics.objects.filter(pk=event.pk).update(total_tickets_sold=2, total_revenue=Decimal("200"))
        TicketBreakdownEntry.objects.filter(pk=entry.pk).update(sold_count=2, revenue=Decimal("200"))
        HostAnalytics.objects.filter(pk="host-1").update(total_tickets_sold=2, total_revenue=Decimal("200"))

        analytics.event_name = "Summer Fest"
        analytics.save()
        entry.save()
        host.save()

        analytics.refresh_from_db()
        entry.refresh_from_db()
        host.refresh_from_db()
        assert analytics.event_name == "Summer Fest"
        assert (analytics.total_tickets_sold, analytics.total_revenue) == (2, Decimal("200"))
        assert (entry.sold_count, entry.revenue) == (2, Decimal("200"))
        assert (host.total_tickets_sold, host.total_revenue) == (2, Decimal("200"))

    def test_booking_saves_are_unrestricted(self, event):
        booking = Booking.objects.create(
            event=event,
            venue_id="venue-1",
            show_id="show-1",
            ticket_type_id="tt",
            ticket_type_name="GA",
            quantity=1,
            price_per_ticket=Decimal("10"),
            total_price=Decimal("10"),
            user_id="user-1",
        )
        booking.status = "CONFIRMED"
        booking.save()

        assert Booking.objects.get(pk=booking.pk).status == "CONFIRMED"


@pytest.mark.django_db
class TestTicketTypeAdmin:
    def test_inventory_is_editable_on_create(self):
        form = TicketTypeForm()
        assert not form.fields["available_quantity"].disabled

    def test_inventory_is_locked_once_the_row_exists(self, ticket_type):
        form = TicketTypeForm(instance=ticket_type)
        assert form.fields["available_quantity"].disabled

    def test_admin_marks_inventory_read_only_on_change(self, ticket_type):
        model_admin = TicketTypeAdmin(TicketType, AdminSite())

        assert "available_quantity" not in model_admin.get_readonly_fields(None)
        assert "available_quantity" in model_admin.get_readonly_fields(None, ticket_type)
        assert "sold_count" in model_admin.get_readonly_fields(None, ticket_type)
