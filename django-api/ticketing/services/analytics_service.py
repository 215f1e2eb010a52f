"""Read side of the analytics documents.

Reads repair stale event metadata (read-repair): an analytics row whose
name is empty or a placeholder, or whose date is missing, is refreshed
from the event record and written back before being returned. Repair is
best effort and never fails the read.
"""

import logging
from dataclasses import replace
from decimal import Decimal

from django.conf import settings

from ticketing.domain import EventAnalytics, EventId, HostAnalytics
from ticketing.domain.errors import EventNotFoundError
from ticketing.domain.models import UNNAMED_EVENT, AnalyticsDrift, HostDashboard
from ticketing.services.event_service import EventService, parse_event_id
from ticketing.stores.interfaces import AnalyticsStore, BookingLedger

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service for dashboard reads and consistency audits."""

    def __init__(
        self,
        store: AnalyticsStore,
        ledger: BookingLedger,
        events: EventService,
        placeholder_names: tuple[str, ...] | None = None,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._events = events
        self._placeholders = frozenset(
            placeholder_names
            if placeholder_names is not None
            else settings.ANALYTICS_PLACEHOLDER_EVENT_NAMES
        )

    def get_event_analytics(self, event_id: str) -> EventAnalytics:
        """Return an event's analytics, zeroed if nothing was sold yet.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If neither analytics nor the event exist.
        """
        parsed = parse_event_id(event_id)
        analytics = self._store.get_event_analytics(parsed)
        if analytics is not None:
            return self._repaired(analytics)

        event = self._events.find_event(parsed)
        if event is None:
            raise EventNotFoundError(event_id)
        return EventAnalytics(
            event_id=parsed,
            event_name=event.title or UNNAMED_EVENT,
            event_date=event.date,
            host_id=event.host_id or "",
            total_tickets_sold=0,
            total_revenue=Decimal("0"),
        )

    def get_host_dashboard(self, host_id: str) -> HostDashboard:
        """Return a host's totals and per-event analytics, highest revenue first."""
        host = self._store.get_host_analytics(host_id) or HostAnalytics(
            host_id=host_id, total_tickets_sold=0, total_revenue=Decimal("0")
        )
        events = sorted(
            (self._repaired(a) for a in self._store.list_event_analytics(host_id)),
            key=lambda a: a.total_revenue,
            reverse=True,
        )
        return HostDashboard(host=host, events=tuple(events))

    def audit(self, event_id: str | None = None) -> list[AnalyticsDrift]:
        """Compare counters with the ledger and host rollups with their events.

        Nothing is rewritten; the caller decides what to do with the drift.
        Host rollups are only checked for a full audit.
        """
        if event_id is not None:
            parsed = parse_event_id(event_id)
            analytics = self._store.get_event_analytics(parsed)
            if analytics is None:
                raise EventNotFoundError(event_id)
            rows = [analytics]
        else:
            rows = self._store.list_event_analytics()

        drift: list[AnalyticsDrift] = []
        for analytics in rows:
            drift.extend(self._audit_event(analytics))

        if event_id is None:
            for host in self._store.list_host_analytics():
                drift.extend(self._audit_host(host, rows))
        return drift

    def uncounted_bookings(self, event_id: str | None = None) -> list[str]:
        """Return confirmed bookings the trigger has not counted (yet).

        Status writes that bypass ``Model.save()`` (queryset ``update()``,
        ``bulk_create``) never reach the trigger and show up here. So does a
        confirmation whose task is still queued.
        """
        parsed = parse_event_id(event_id) if event_id is not None else None
        return [str(b) for b in self._ledger.uncounted_confirmed_bookings(parsed)]

    def _audit_event(self, analytics: EventAnalytics) -> list[AnalyticsDrift]:
        key = str(analytics.event_id)
        tickets, revenue = self._ledger.confirmed_totals(analytics.event_id)
        breakdown_tickets = sum(b.sold_count for b in analytics.ticket_breakdown.values())

        checks = [
            ("total_tickets_sold", tickets, analytics.total_tickets_sold),
            ("total_revenue", revenue, analytics.total_revenue),
            ("ticket_breakdown.sold_count", analytics.total_tickets_sold, breakdown_tickets),
        ]
        mirror = self._events.mirrored_tickets_sold(analytics.event_id)
        if mirror is not None:
            checks.append(("events.tickets_sold", analytics.total_tickets_sold, mirror))
        return [
            AnalyticsDrift(scope="event", key=key, counter=name, expected=expected, actual=actual)
            for name, expected, actual in checks
            if expected != actual
        ]

    def _audit_host(self, host: HostAnalytics, rows: list[EventAnalytics]) -> list[AnalyticsDrift]:
        owned = [a for a in rows if a.host_id == host.host_id]
        checks = [
            ("total_tickets_sold", sum(a.total_tickets_sold for a in owned), host.total_tickets_sold),
            (
                "total_revenue",
                sum((a.total_revenue for a in owned), Decimal("0")),
                host.total_revenue,
            ),
        ]
        return [
            AnalyticsDrift(scope="host", key=host.host_id, counter=name, expected=expected, actual=actual)
            for name, expected, actual in checks
            if expected != actual
        ]

    def _needs_repair(self, analytics: EventAnalytics) -> bool:
        return (
            not analytics.event_name
            or analytics.event_name in self._placeholders
            or not analytics.event_date
        )

    def _repaired(self, analytics: EventAnalytics) -> EventAnalytics:
        if self._needs_repair(analytics):
            analytics = self._repair(analytics.event_id, analytics)
        if not analytics.event_name:
            analytics = replace(analytics, event_name=UNNAMED_EVENT)
        return analytics

    def _repair(self, event_id: EventId, analytics: EventAnalytics) -> EventAnalytics:
        try:
            event = self._events.find_event(event_id)
            if event is None:
                return analytics

            name = analytics.event_name
            if not name or name in self._placeholders:
                name = event.title or name
            date = analytics.event_date or event.date

            if (name, date) == (analytics.event_name, analytics.event_date):
                return analytics
            self._store.update_event_metadata(event_id, name, date)
            logger.info("Repaired analytics metadata for event %s", event_id)
            return replace(analytics, event_name=name, event_date=date)
        except Exception:
            logger.exception("Could not repair analytics metadata for event %s", event_id)
            return analytics
