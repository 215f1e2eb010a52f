"""Django ORM implementations of the stores.

Counters are changed with ``F()`` expressions inside ``UPDATE`` statements,
so concurrent writers add up instead of overwriting each other. Queryset
``update()`` skips ``auto_now``, hence the explicit ``updated_at``.
"""

from decimal import Decimal
from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import Trim, Upper
from django.utils import timezone

from ticketing import models
from ticketing.domain import (
    AnalyticsDelta,
    Booking,
    BookingId,
    BookingRequest,
    EventAnalytics,
    EventId,
    EventRecord,
    HostAnalytics,
    Money,
    TicketBreakdown,
    TicketInventory,
    TicketTypeKey,
)
from ticketing.domain.status import CONFIRMED_EQUIVALENT_STATUSES
from ticketing.stores.interfaces import AnalyticsStore, BookingLedger, EventStore, InventoryStore


def to_event_record(row: models.Event) -> EventRecord:
    date = row.date or (row.start_date.isoformat() if row.start_date else "")
    return EventRecord(
        id=EventId(row.id),
        title=row.title or row.name,
        date=date,
        host_id=row.host_uid or row.host_id or row.organizer_id or None,
    )


def to_booking(row: models.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        event_id=EventId(row.event_id),
        venue_id=row.venue_id,
        show_id=row.show_id,
        ticket_type_id=row.ticket_type_id,
        ticket_type_name=row.ticket_type_name,
        quantity=row.quantity,
        price_per_ticket=Money(row.price_per_ticket),
        total_price=Money(row.total_price),
        user_id=row.user_id,
        status=row.status,
        host_id=row.host_id or None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_event_analytics(row: models.EventAnalytics) -> EventAnalytics:
    return EventAnalytics(
        event_id=EventId(row.event_id),
        event_name=row.event_name,
        event_date=row.event_date,
        host_id=row.host_id,
        total_tickets_sold=row.total_tickets_sold,
        total_revenue=row.total_revenue,
        ticket_breakdown={
            entry.ticket_type_name: TicketBreakdown(
                sold_count=entry.sold_count, revenue=entry.revenue
            )
            for entry in row.breakdown.all()
        },
        updated_at=row.updated_at,
    )


def to_host_analytics(row: models.HostAnalytics) -> HostAnalytics:
    return HostAnalytics(
        host_id=row.host_id,
        total_tickets_sold=row.total_tickets_sold,
        total_revenue=row.total_revenue,
        updated_at=row.updated_at,
    )


def confirmed_bookings():
    """Bookings whose status, trimmed and upper-cased, is confirmed-equivalent."""
    return models.Booking.objects.annotate(
        normalized_status=Upper(Trim("status"))
    ).filter(normalized_status__in=CONFIRMED_EQUIVALENT_STATUSES)


class DjangoEventStore(EventStore):
    """Event metadata backed by the ``Event`` table."""

    def get_event(self, event_id: EventId) -> EventRecord | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return to_event_record(row) if row else None

    def increment_tickets_sold(self, event_id: EventId, tickets: int) -> None:
        models.Event.objects.filter(pk=event_id.value).update(
            tickets_sold=F("tickets_sold") + tickets,
            total_tickets_sold=F("total_tickets_sold") + tickets,
        )

    def get_tickets_sold(self, event_id: EventId) -> int | None:
        return (
            models.Event.objects.filter(pk=event_id.value)
            .values_list("tickets_sold", flat=True)
            .first()
        )


class DjangoInventoryStore(InventoryStore):
    """Ticket type rows, locked with ``SELECT ... FOR UPDATE``."""

    def _filter(self, key: TicketTypeKey):
        return models.TicketType.objects.filter(
            pk=key.ticket_type_id,
            event_id=key.event_id.value,
            venue_id=key.venue_id,
            show_id=key.show_id,
        )

    def lock_ticket_type(self, key: TicketTypeKey) -> TicketInventory | None:
        row = self._filter(key).select_for_update().first()
        if row is None:
            return None
        return TicketInventory(
            key=key,
            name=row.name,
            price=Money(row.price),
            available_quantity=row.available_quantity,
            sold_count=row.sold_count,
        )

    def reserve(self, key: TicketTypeKey, quantity: int) -> bool:
        # The availability filter makes this a compare-and-swap even where
        # the backend ignores row locks.
        updated = (
            self._filter(key)
            .filter(available_quantity__gte=quantity)
            .update(
                available_quantity=F("available_quantity") - quantity,
                sold_count=F("sold_count") + quantity,
                updated_at=timezone.now(),
            )
        )
        return updated == 1


class DjangoBookingLedger(BookingLedger):
    """Booking rows scoped to their event."""

    def create_booking(self, request: BookingRequest, status: str, host_id: str) -> Booking:
        row = models.Booking.objects.create(
            event_id=request.event_id.value,
            venue_id=request.venue_id,
            show_id=request.show_id,
            ticket_type_id=request.ticket_type_id,
            ticket_type_name=request.ticket_type_name,
            quantity=request.quantity,
            price_per_ticket=request.price_per_ticket,
            total_price=request.total_price,
            user_id=request.user_id,
            user_email=request.user_email,
            user_name=request.user_name,
            host_id=host_id,
            status=status,
        )
        return to_booking(row)

    def get_booking(self, event_id: EventId, booking_id: BookingId) -> Booking | None:
        row = models.Booking.objects.filter(pk=booking_id.value, event_id=event_id.value).first()
        return to_booking(row) if row else None

    def set_status(self, event_id: EventId, booking_id: BookingId, status: str) -> Booking | None:
        row = (
            models.Booking.objects.select_for_update()
            .filter(pk=booking_id.value, event_id=event_id.value)
            .first()
        )
        if row is None:
            return None
        row.status = status
        # Model save, not queryset update: the analytics trigger listens to it.
        row.save(update_fields=["status", "updated_at"])
        return to_booking(row)

    def claim_for_analytics(self, booking_id: BookingId) -> bool:
        claimed = models.Booking.objects.filter(
            pk=booking_id.value, analytics_counted_at__isnull=True
        ).update(analytics_counted_at=timezone.now())
        return claimed == 1

    def confirmed_totals(self, event_id: EventId) -> tuple[int, Decimal]:
        totals = (
            confirmed_bookings()
            .filter(event_id=event_id.value)
            .aggregate(
                tickets=Sum("quantity"),
                revenue=Sum(
                    ExpressionWrapper(
                        F("quantity") * F("price_per_ticket"),
                        output_field=DecimalField(max_digits=14, decimal_places=2),
                    )
                ),
            )
        )
        return totals["tickets"] or 0, Decimal(totals["revenue"] or 0)

    def uncounted_confirmed_bookings(self, event_id: EventId | None = None) -> list[BookingId]:
        rows = confirmed_bookings().filter(analytics_counted_at__isnull=True)
        if event_id is not None:
            rows = rows.filter(event_id=event_id.value)
        return [BookingId(pk) for pk in rows.order_by("created_at").values_list("pk", flat=True)]


class DjangoAnalyticsStore(AnalyticsStore):
    """Event analytics, ticket breakdown and host analytics tables."""

    def ensure_documents(self, event: EventRecord, host_id: str) -> None:
        now = timezone.now()
        _, created = models.EventAnalytics.objects.get_or_create(
            event_id=event.id.value,
            defaults={
                "host_id": host_id,
                "event_name": event.title,
                "event_date": event.date,
            },
        )
        if not created:
            stamp = {"host_id": host_id, "updated_at": now}
            if event.title:
                stamp["event_name"] = event.title
            if event.date:
                stamp["event_date"] = event.date
            models.EventAnalytics.objects.filter(pk=event.id.value).update(**stamp)
        models.HostAnalytics.objects.get_or_create(host_id=host_id)

    def apply(
        self,
        event_id: EventId,
        host_id: str,
        delta: AnalyticsDelta,
        event: EventRecord | None = None,
    ) -> None:
        now = timezone.now()
        analytics, _ = models.EventAnalytics.objects.get_or_create(
            event_id=event_id.value,
            defaults={
                "host_id": host_id,
                "event_name": event.title if event else "",
                "event_date": event.date if event else "",
            },
        )
        models.EventAnalytics.objects.filter(pk=event_id.value).update(
            host_id=host_id,
            total_tickets_sold=F("total_tickets_sold") + delta.tickets,
            total_revenue=F("total_revenue") + delta.revenue,
            updated_at=now,
        )

        entry, _ = models.TicketBreakdownEntry.objects.get_or_create(
            analytics=analytics, ticket_type_name=delta.ticket_type_name
        )
        models.TicketBreakdownEntry.objects.filter(pk=entry.pk).update(
            sold_count=F("sold_count") + delta.tickets,
            revenue=F("revenue") + delta.revenue,
        )

        models.HostAnalytics.objects.get_or_create(host_id=host_id)
        models.HostAnalytics.objects.filter(pk=host_id).update(
            total_tickets_sold=F("total_tickets_sold") + delta.tickets,
            total_revenue=F("total_revenue") + delta.revenue,
            updated_at=now,
        )

    def get_event_analytics(self, event_id: EventId) -> EventAnalytics | None:
        row = (
            models.EventAnalytics.objects.prefetch_related("breakdown")
            .filter(pk=event_id.value)
            .first()
        )
        return to_event_analytics(row) if row else None

    def list_event_analytics(self, host_id: str | None = None) -> list[EventAnalytics]:
        rows = models.EventAnalytics.objects.prefetch_related("breakdown").order_by(
            "-total_revenue"
        )
        if host_id is not None:
            rows = rows.filter(host_id=host_id)
        return [to_event_analytics(row) for row in rows]

    def get_host_analytics(self, host_id: str) -> HostAnalytics | None:
        row = models.HostAnalytics.objects.filter(pk=host_id).first()
        return to_host_analytics(row) if row else None

    def list_host_analytics(self) -> list[HostAnalytics]:
        return [to_host_analytics(row) for row in models.HostAnalytics.objects.order_by("host_id")]

    def update_event_metadata(self, event_id: EventId, event_name: str, event_date: str) -> None:
        models.EventAnalytics.objects.filter(pk=event_id.value).update(
            event_name=event_name,
            event_date=event_date,
        )
