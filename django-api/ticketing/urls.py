from django.urls import path

from ticketing.handlers import (
    BookingCreateView,
    BookingStatusView,
    EventAnalyticsView,
    HostAnalyticsView,
)

urlpatterns = [
    path("bookings", BookingCreateView.as_view(), name="booking-create"),
    path(
        "events/<str:event_id>/bookings/<str:booking_id>/status",
        BookingStatusView.as_view(),
        name="booking-status",
    ),
    path(
        "analytics/events/<str:event_id>",
        EventAnalyticsView.as_view(),
        name="event-analytics",
    ),
    path(
        "analytics/hosts/<str:host_id>",
        HostAnalyticsView.as_view(),
        name="host-analytics",
    ),
]
