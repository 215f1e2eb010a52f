"""Analytics reconciliation for booking writes.

Invoked (through a Celery task) with the before/after snapshots of every
booking save. Delivery is at least once and may be late or out of order.
Two guards keep the counters exact:

1. Only a transition *into* a confirmed-equivalent status counts.
2. The booking's ``analytics_counted_at`` marker is claimed in the same
   atomic write as the increments, so a redelivered transition finds it
   taken and writes nothing.
"""

import logging
from enum import Enum

from django.db import OperationalError, transaction

from ticketing.domain import AnalyticsDelta, BookingId, BookingSnapshot, EventId
from ticketing.domain.errors import HostResolutionError, TransientStoreError
from ticketing.domain.status import enters_confirmed_state, is_confirmed_equivalent
from ticketing.services.event_service import EventService
from ticketing.stores.interfaces import AnalyticsStore, BookingLedger

logger = logging.getLogger(__name__)


class ReconciliationOutcome(str, Enum):
    COUNTED = "counted"
    DELETED = "deleted"
    NOT_CONFIRMED = "not_confirmed"
    ALREADY_CONFIRMED = "already_confirmed"
    ALREADY_COUNTED = "already_counted"


class ReconciliationService:
    """Keeps event, host and event-mirror counters in step with the ledger."""

    def __init__(
        self,
        ledger: BookingLedger,
        analytics: AnalyticsStore,
        events: EventService,
    ) -> None:
        self._ledger = ledger
        self._analytics = analytics
        self._events = events

    def handle_booking_write(
        self,
        before: BookingSnapshot | None,
        after: BookingSnapshot | None,
    ) -> ReconciliationOutcome:
        """Count a booking the first time it reaches a confirmed-equivalent status.

        Raises:
            HostResolutionError: If neither the booking nor its event names a host.
            TransientStoreError: If the counter write hit a store error.
        """
        if after is None:
            # Deletes never decrement.
            logger.info("Booking %s deleted, analytics untouched", before.booking_id if before else "?")
            return ReconciliationOutcome.DELETED

        if not is_confirmed_equivalent(after.status):
            logger.debug("Booking %s is %s, not counted", after.booking_id, after.status)
            return ReconciliationOutcome.NOT_CONFIRMED

        previous_status = before.status if before else None
        if not enters_confirmed_state(previous_status, after.status):
            logger.debug("Booking %s was already %s, not counted again", after.booking_id, previous_status)
            return ReconciliationOutcome.ALREADY_CONFIRMED

        booking_id = BookingId.from_string(after.booking_id)
        event_id = EventId.from_string(after.event_id)

        event = None
        host_id = after.host_id
        if not host_id:
            event = self._events.find_event(event_id)
            host_id = event.host_id if event else None
        if not host_id:
            logger.error(
                "Booking %s of event %s cannot be attributed to a host; analytics not updated",
                booking_id,
                event_id,
            )
            raise HostResolutionError(str(event_id), str(booking_id))

        delta = AnalyticsDelta.for_booking(
            after.price_per_ticket, after.quantity, after.ticket_type_name
        )

        try:
            with transaction.atomic():
                if not self._ledger.claim_for_analytics(booking_id):
                    logger.info("Booking %s already counted, skipping", booking_id)
                    return ReconciliationOutcome.ALREADY_COUNTED
                self._analytics.apply(event_id, host_id, delta, event)
                self._events.record_tickets_sold(event_id, delta.tickets)
        except OperationalError as exc:
            raise TransientStoreError() from exc

        logger.info(
            "Counted booking %s for host %s, event %s (+%s revenue, +%d tickets)",
            booking_id,
            host_id,
            event_id,
            delta.revenue,
            delta.tickets,
        )
        return ReconciliationOutcome.COUNTED
