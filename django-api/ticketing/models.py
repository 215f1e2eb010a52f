"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class CounterColumnsMixin:
    """Keeps counter columns out of saves of existing rows.

    Counters only move through ``F()`` increments in the stores. A
    ``save()`` of a row loaded earlier (an admin edit, say) writes every
    other column and leaves the stored counters alone. Inserts still
    write the initial values.
    """

    counter_fields: tuple[str, ...] = ()

    def save(self, *args, **kwargs):
        if not self._state.adding and self.counter_fields:
            update_fields = kwargs.get("update_fields")
            if update_fields is None:
                update_fields = [
                    f.name for f in self._meta.concrete_fields if not f.primary_key
                ]
            kwargs["update_fields"] = [
                name for name in update_fields if name not in self.counter_fields
            ]
        super().save(*args, **kwargs)


class Event(CounterColumnsMixin, models.Model):
    """Persistence model for events.

    Several writers have created events over time, so the title, date and
    host live under more than one column name. ``tickets_sold`` and
    ``total_tickets_sold`` mirror the analytics counter for list screens.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255, blank=True, default="")
    name = models.CharField(max_length=255, blank=True, default="")
    date = models.CharField(max_length=64, blank=True, default="")
    start_date = models.DateTimeField(blank=True, null=True)
    host_uid = models.CharField(max_length=128, blank=True, default="")
    host_id = models.CharField(max_length=128, blank=True, default="")
    organizer_id = models.CharField(max_length=128, blank=True, default="")
    tickets_sold = models.PositiveIntegerField(default=0)
    total_tickets_sold = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    counter_fields = ("tickets_sold", "total_tickets_sold")

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["host_uid"]),
            models.Index(fields=["host_id"]),
        ]

    def __str__(self) -> str:
        return self.title or self.name or str(self.id)


class TicketType(CounterColumnsMixin, models.Model):
    """Inventory for one ticket type of one show at one venue.

    ``available_quantity`` is set when the row is created; after that only
    the booking transaction moves tickets from available to sold.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ticket_types")
    venue_id = models.CharField(max_length=128)
    show_id = models.CharField(max_length=128)
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    available_quantity = models.PositiveIntegerField()
    sold_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    counter_fields = ("available_quantity", "sold_count")

    class Meta:
        indexes = [
            models.Index(fields=["event", "venue_id", "show_id"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(available_quantity__gte=0),
                name="ticket_type_available_quantity_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"


class Booking(models.Model):
    """Ledger record. Only ``status`` and ``updated_at`` change after creation.

    The analytics trigger hangs off ``pre_save``/``post_save``, so status
    changes must go through ``save()`` (``BookingService.update_booking_status``
    does). Queryset ``update()`` and ``bulk_create`` bypass it; the
    ``audit_analytics`` command lists confirmed bookings left uncounted.

    ``analytics_counted_at`` is set once, in the same atomic write that adds
    the booking to the analytics counters.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="bookings")
    venue_id = models.CharField(max_length=128)
    show_id = models.CharField(max_length=128)
    ticket_type_id = models.CharField(max_length=128)
    ticket_type_name = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField()
    price_per_ticket = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    user_id = models.CharField(max_length=128)
    user_email = models.CharField(max_length=254, blank=True, default="")
    user_name = models.CharField(max_length=255, blank=True, default="")
    host_id = models.CharField(max_length=128, blank=True, default="")
    status = models.CharField(max_length=32, default="PENDING")
    analytics_counted_at = models.DateTimeField(blank=True, null=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class EventAnalytics(CounterColumnsMixin, models.Model):
    """Per-event counters. Counter columns are only ever incremented."""

    event = models.OneToOneField(
        Event, on_delete=models.CASCADE, primary_key=True, related_name="analytics"
    )
    event_name = models.CharField(max_length=255, blank=True, default="")
    event_date = models.CharField(max_length=64, blank=True, default="")
    host_id = models.CharField(max_length=128)
    total_tickets_sold = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    counter_fields = ("total_tickets_sold", "total_revenue")

    class Meta:
        verbose_name_plural = "event analytics"
        indexes = [
            models.Index(fields=["host_id"]),
        ]

    def __str__(self) -> str:
        return f"{self.event_name or self.event_id}: {self.total_tickets_sold}"


class TicketBreakdownEntry(CounterColumnsMixin, models.Model):
    """One entry of an event's ticket breakdown, keyed by ticket type name."""

    analytics = models.ForeignKey(
        EventAnalytics, on_delete=models.CASCADE, related_name="breakdown"
    )
    ticket_type_name = models.CharField(max_length=100)
    sold_count = models.PositiveIntegerField(default=0)
    revenue = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    counter_fields = ("sold_count", "revenue")

    class Meta:
        verbose_name_plural = "ticket breakdown entries"
        constraints = [
            models.UniqueConstraint(
                fields=["analytics", "ticket_type_name"],
                name="unique_breakdown_per_ticket_type",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_type_name}: {self.sold_count}"


class HostAnalytics(CounterColumnsMixin, models.Model):
    """Per-host rollup of every event the host owns."""

    host_id = models.CharField(max_length=128, primary_key=True)
    total_tickets_sold = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    counter_fields = ("total_tickets_sold", "total_revenue")

    class Meta:
        verbose_name_plural = "host analytics"

    def __str__(self) -> str:
        return f"{self.host_id}: {self.total_tickets_sold}"
