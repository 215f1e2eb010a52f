"""Tests for the audit_analytics management command.

Run with: pytest tests/test_audit_command.py -v
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from ticketing.models import Booking, EventAnalytics, HostAnalytics


def run(*args) -> str:
    out = StringIO()
    call_command("audit_analytics", *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestAuditAnalyticsCommand:
    def test_clean_ledger(self, event):
        EventAnalytics.objects.create(event=event, host_id="host-1")
        HostAnalytics.objects.create(host_id="host-1")

        assert "Analytics match the ledger" in run()

    def test_reports_drift(self, event):
        EventAnalytics.objects.create(event=event, host_id="host-1", total_tickets_sold=3)

        output = run()

        assert f"event {event.id} total_tickets_sold: expected 0, found 3" in output

    def test_fail_on_drift(self, event):
        EventAnalytics.objects.create(event=event, host_id="host-1", total_revenue=Decimal("10"))

        with pytest.raises(CommandError, match="1 analytics counter"):
            run("--fail-on-drift")

    def test_single_event(self, event):
        EventAnalytics.objects.create(event=event, host_id="host-1")
        assert "Analytics match the ledger" in run("--event", str(event.id))

    def test_unknown_event(self):
        with pytest.raises(CommandError):
            run("--event", "not-a-uuid")

    def test_reports_confirmed_booking_that_bypassed_the_trigger(self, event):
        booking = Booking.objects.create(
            event=event,
            venue_id="venue-1",
            show_id="show-1",
            ticket_type_id="tt",
            ticket_type_name="GA",
            quantity=1,
            price_per_ticket=Decimal("10.00"),
            total_price=Decimal("10.00"),
            user_id="user-1",
        )
        Booking.objects.filter(pk=booking.pk).update(status="CONFIRMED")

        assert f"booking {booking.pk} is confirmed but not counted" in run()
        with pytest.raises(CommandError, match="1 confirmed booking"):
            run("--fail-on-drift")
