"""Django signals for the booking trigger and cache invalidation.

Every booking save hands its before/after snapshots to the reconciliation
task once the surrounding transaction commits. The "before" snapshot is
read from the database in ``pre_save``, so it reflects what was durably
stored, not what the caller's instance happened to hold.
"""

from functools import partial

from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from ticketing.domain import BookingSnapshot
from ticketing.models import Booking, Event
from ticketing.services.event_service import event_cache_key
from ticketing.tasks import reconcile_booking_analytics


def booking_snapshot(booking: Booking) -> BookingSnapshot:
    return BookingSnapshot(
        booking_id=str(booking.pk),
        event_id=str(booking.event_id),
        status=booking.status,
        quantity=booking.quantity,
        price_per_ticket=booking.price_per_ticket,
        ticket_type_name=booking.ticket_type_name,
        host_id=booking.host_id or None,
    )


def _enqueue_reconciliation(before: dict | None, after: dict | None) -> None:
    reconcile_booking_analytics.delay(before, after)


@receiver(pre_save, sender=Booking)
def capture_previous_booking(sender, instance, **kwargs):
    """Remember the stored state of the booking before it is overwritten."""
    if instance._state.adding:
        instance._previous_snapshot = None
        return

    previous = sender.objects.filter(pk=instance.pk).first()
    instance._previous_snapshot = booking_snapshot(previous).to_dict() if previous else None


@receiver(post_save, sender=Booking)
def dispatch_booking_reconciliation(sender, instance, created, **kwargs):
    """Queue the analytics trigger for this write after commit."""
    before = None if created else getattr(instance, "_previous_snapshot", None)
    after = booking_snapshot(instance).to_dict()
    transaction.on_commit(partial(_enqueue_reconciliation, before, after))

    if hasattr(instance, "_previous_snapshot"):
        delattr(instance, "_previous_snapshot")


@receiver(post_delete, sender=Booking)
def dispatch_booking_deletion(sender, instance, **kwargs):
    """Deletes are delivered too; the trigger ignores them."""
    before = booking_snapshot(instance).to_dict()
    transaction.on_commit(partial(_enqueue_reconciliation, before, None))


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate cached metadata when an event is saved or deleted."""
    cache.delete(event_cache_key(instance.pk))
