import logging

from celery import shared_task
from django.conf import settings

from ticketing.domain import BookingSnapshot
from ticketing.domain.errors import HostResolutionError, TransientStoreError
from ticketing.services import build_reconciliation_service

logger = logging.getLogger(__name__)


@shared_task(
    name="ticketing.reconcile_booking_analytics",
    acks_late=True,
    autoretry_for=(TransientStoreError,),
    retry_backoff=True,
    retry_jitter=True,
    max_retries=settings.RECONCILIATION_MAX_RETRIES,
)
def reconcile_booking_analytics(before: dict | None, after: dict | None) -> str:
    """Apply a booking write to the analytics counters.

    Safe to redeliver: the service counts each booking at most once.
    """
    service = build_reconciliation_service()
    try:
        outcome = service.handle_booking_write(
            BookingSnapshot.from_dict(before) if before else None,
            BookingSnapshot.from_dict(after) if after else None,
        )
    except HostResolutionError as exc:
        logger.error(
            "Orphaned booking %s (event %s): no host to attribute analytics to",
            exc.booking_id,
            exc.event_id,
        )
        raise
    return outcome.value
