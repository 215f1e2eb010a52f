"""Event lookup service.

Event metadata is read far more often than it changes, so lookups go
through the Django cache. ``signals.py`` drops the entry whenever the
event row is saved or deleted.
"""

from django.conf import settings
from django.core.cache import cache

from ticketing.domain import EventId, EventRecord
from ticketing.domain.errors import EventNotFoundError, InvalidEventIdError
from ticketing.stores.interfaces import EventStore


def event_cache_key(event_id: EventId | str) -> str:
    return f"events:{event_id}"


def parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidEventIdError() from exc


class EventService:
    """Service for authoritative event metadata."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def find_event(self, event_id: EventId) -> EventRecord | None:
        """Return an event by ID, or None if not found. Misses are not cached."""
        key = event_cache_key(event_id)
        event = cache.get(key)
        if event is None:
            event = self._store.get_event(event_id)
            if event is not None:
                cache.set(key, event, timeout=settings.EVENT_CACHE_TIMEOUT)
        return event

    def get_event(self, event_id: str) -> EventRecord:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self.find_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def record_tickets_sold(self, event_id: EventId, tickets: int) -> None:
        self._store.increment_tickets_sold(event_id, tickets)

    def mirrored_tickets_sold(self, event_id: EventId) -> int | None:
        """Return the event's ``tickets_sold`` mirror, bypassing the cache."""
        return self._store.get_tickets_sold(event_id)
