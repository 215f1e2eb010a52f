from ticketing.handlers.views import (
    BookingCreateView,
    BookingStatusView,
    EventAnalyticsView,
    HostAnalyticsView,
)

__all__ = [
    "BookingCreateView",
    "BookingStatusView",
    "EventAnalyticsView",
    "HostAnalyticsView",
]
