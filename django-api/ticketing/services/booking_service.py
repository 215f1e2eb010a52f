"""Booking service - the booking transaction and status changes.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import random
import time
from decimal import Decimal, InvalidOperation
from uuid import UUID

from django.conf import settings
from django.db import OperationalError, transaction

from ticketing.domain import (
    Booking,
    BookingId,
    BookingRequest,
    EventRecord,
    Money,
    Quantity,
    TicketTypeKey,
)
from ticketing.domain.errors import (
    BookingNotFoundError,
    EventNotFoundError,
    HostResolutionError,
    InsufficientInventoryError,
    InvalidBookingIdError,
    InvalidBookingRequestError,
    TicketTypeNotFoundError,
    TransientStoreError,
)
from ticketing.domain.status import BookingStatus
from ticketing.services.event_service import parse_event_id
from ticketing.stores.interfaces import AnalyticsStore, BookingLedger, EventStore, InventoryStore

logger = logging.getLogger(__name__)


def parse_booking_id(value: str) -> BookingId:
    try:
        return BookingId.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidBookingIdError() from exc


class BookingService:
    """Service for creating bookings and moving them between statuses."""

    def __init__(
        self,
        inventory: InventoryStore,
        ledger: BookingLedger,
        events: EventStore,
        analytics: AnalyticsStore,
        max_attempts: int | None = None,
        retry_backoff: float | None = None,
    ) -> None:
        self._inventory = inventory
        self._ledger = ledger
        self._events = events
        self._analytics = analytics
        self._max_attempts = max_attempts or settings.BOOKING_TRANSACTION_MAX_ATTEMPTS
        self._retry_backoff = (
            settings.BOOKING_TRANSACTION_RETRY_BACKOFF if retry_backoff is None else retry_backoff
        )

    def create_pending_booking(self, request: BookingRequest) -> BookingId:
        """Reserve tickets and append a PENDING booking in one transaction.

        Analytics counters are not touched here; they move when the booking
        is confirmed (see ReconciliationService). The analytics documents are
        created and stamped with the event's metadata and host.

        Raises:
            InvalidBookingRequestError: Before any write, on bad input.
            TicketTypeNotFoundError: If the inventory row does not exist.
            InsufficientInventoryError: If fewer tickets remain than requested.
            EventNotFoundError: If the event does not exist.
            HostResolutionError: If the event has no host.
            TransientStoreError: If the store stayed contended for every attempt.
        """
        key = self._validate(request)

        for attempt in range(1, self._max_attempts + 1):
            try:
                booking = self._run_transaction(request, key)
            except OperationalError as exc:
                if attempt == self._max_attempts:
                    logger.error(
                        "Booking for event %s failed after %d attempts: %s",
                        request.event_id,
                        attempt,
                        exc,
                    )
                    raise TransientStoreError() from exc
                logger.warning(
                    "Booking transaction for event %s hit contention (attempt %d): %s",
                    request.event_id,
                    attempt,
                    exc,
                )
                # Jittered backoff.
                time.sleep(random.uniform(0, self._retry_backoff * attempt))
                continue
            logger.info(
                "Booking %s created for event %s: %d x %s",
                booking.id,
                booking.event_id,
                booking.quantity,
                booking.ticket_type_name,
            )
            return booking.id

        raise TransientStoreError()

    def update_booking_status(self, event_id: str, booking_id: str, status: str) -> Booking:
        """Change a booking's status. The only mutation a booking allows.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            InvalidBookingIdError: If the booking_id is not a valid UUID.
            InvalidBookingRequestError: If the status is empty.
            BookingNotFoundError: If the booking is not in this event's ledger.
        """
        parsed_event_id = parse_event_id(event_id)
        parsed_booking_id = parse_booking_id(booking_id)
        status = (status or "").strip()
        if not status:
            raise InvalidBookingRequestError("Status is required")

        try:
            with transaction.atomic():
                booking = self._ledger.set_status(parsed_event_id, parsed_booking_id, status)
        except OperationalError as exc:
            raise TransientStoreError() from exc

        if booking is None:
            raise BookingNotFoundError(booking_id)
        logger.info("Booking %s moved to %s", booking.id, booking.status)
        return booking

    def _validate(self, request: BookingRequest) -> TicketTypeKey:
        required = (
            request.venue_id,
            request.show_id,
            request.ticket_type_id,
            request.ticket_type_name,
            request.user_id,
        )
        if not all(required):
            raise InvalidBookingRequestError("Missing required fields")

        try:
            Quantity(request.quantity)
        except ValueError as exc:
            raise InvalidBookingRequestError(str(exc)) from exc

        try:
            Money(Decimal(request.price_per_ticket))
            Money(Decimal(request.total_price))
        except (TypeError, ValueError, InvalidOperation) as exc:
            raise InvalidBookingRequestError("Prices must be non-negative amounts") from exc

        try:
            ticket_type_id = UUID(str(request.ticket_type_id))
        except ValueError as exc:
            raise InvalidBookingRequestError("Invalid ticket type ID format") from exc

        return TicketTypeKey(
            event_id=request.event_id,
            venue_id=request.venue_id,
            show_id=request.show_id,
            ticket_type_id=ticket_type_id,
        )

    @transaction.atomic
    def _run_transaction(self, request: BookingRequest, key: TicketTypeKey) -> Booking:
        inventory = self._inventory.lock_ticket_type(key)
        if inventory is None:
            raise TicketTypeNotFoundError(request.ticket_type_id)
        if inventory.available_quantity < request.quantity:
            raise InsufficientInventoryError(inventory.available_quantity)

        event = self._events.get_event(request.event_id)
        if event is None:
            raise EventNotFoundError(str(request.event_id))
        if not event.host_id:
            logger.error("Event %s has no host; refusing booking", request.event_id)
            raise HostResolutionError(str(request.event_id))

        booking = self._ledger.create_booking(request, BookingStatus.PENDING.value, event.host_id)

        if not self._inventory.reserve(key, request.quantity):
            current = self._inventory.lock_ticket_type(key)
            raise InsufficientInventoryError(current.available_quantity if current else 0)

        # Client-supplied name/date only fill gaps in the event record.
        self._analytics.ensure_documents(
            EventRecord(
                id=event.id,
                title=event.title or request.event_name,
                date=event.date or request.event_date,
                host_id=event.host_id,
            ),
            event.host_id,
        )
        return booking
