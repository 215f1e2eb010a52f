"""Serializers for parsing requests and rendering domain models.

Field names follow the camelCase JSON the dashboard and checkout clients
already speak.
"""

from rest_framework import serializers

from ticketing.domain import BookingRequest, EventId

MISSING_FIELD_CODES = {"required", "null", "blank"}


def first_error_message(errors: dict) -> str:
    """Collapse serializer errors into one user-facing sentence."""
    for details in errors.values():
        for detail in details:
            if getattr(detail, "code", None) in MISSING_FIELD_CODES:
                return "Missing required fields"
    field_name = next(iter(errors), "request")
    return f"Invalid {field_name}"


class BookingRequestSerializer(serializers.Serializer):
    """Body of POST /api/bookings."""

    eventId = serializers.UUIDField()
    eventName = serializers.CharField(required=False, allow_blank=True, default="")
    eventDate = serializers.CharField(required=False, allow_blank=True, default="")
    venueId = serializers.CharField()
    showId = serializers.CharField()
    ticketTypeId = serializers.CharField()
    ticketTypeName = serializers.CharField()
    quantity = serializers.IntegerField()
    pricePerTicket = serializers.DecimalField(max_digits=10, decimal_places=2)
    totalPrice = serializers.DecimalField(max_digits=12, decimal_places=2)
    userId = serializers.CharField()
    userEmail = serializers.CharField(required=False, allow_blank=True, default="")
    userName = serializers.CharField(required=False, allow_blank=True, default="")

    def to_request(self) -> BookingRequest:
        data = self.validated_data
        return BookingRequest(
            event_id=EventId(data["eventId"]),
            venue_id=data["venueId"],
            show_id=data["showId"],
            ticket_type_id=data["ticketTypeId"],
            ticket_type_name=data["ticketTypeName"],
            quantity=data["quantity"],
            price_per_ticket=data["pricePerTicket"],
            total_price=data["totalPrice"],
            user_id=data["userId"],
            user_email=data["userEmail"],
            user_name=data["userName"],
            event_name=data["eventName"],
            event_date=data["eventDate"],
        )


class BookingStatusSerializer(serializers.Serializer):
    """Body of PATCH /api/events/{event_id}/bookings/{booking_id}/status."""

    status = serializers.CharField(max_length=32)


class TicketBreakdownSerializer(serializers.Serializer):
    soldCount = serializers.IntegerField(source="sold_count")
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2, coerce_to_string=False)


class EventAnalyticsSerializer(serializers.Serializer):
    """Serializer for EventAnalytics domain model."""

    eventId = serializers.CharField(source="event_id")
    eventName = serializers.CharField(source="event_name")
    eventDate = serializers.CharField(source="event_date")
    hostId = serializers.CharField(source="host_id")
    totalTicketsSold = serializers.IntegerField(source="total_tickets_sold")
    totalRevenue = serializers.DecimalField(
        source="total_revenue", max_digits=14, decimal_places=2, coerce_to_string=False
    )
    ticketBreakdown = serializers.SerializerMethodField()
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)

    def get_ticketBreakdown(self, obj) -> dict:
        return {
            name: TicketBreakdownSerializer(entry).data
            for name, entry in obj.ticket_breakdown.items()
        }


class HostAnalyticsSerializer(serializers.Serializer):
    """Serializer for HostAnalytics domain model."""

    hostId = serializers.CharField(source="host_id")
    totalTicketsSold = serializers.IntegerField(source="total_tickets_sold")
    totalRevenue = serializers.DecimalField(
        source="total_revenue", max_digits=14, decimal_places=2, coerce_to_string=False
    )
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)


class HostDashboardSerializer(serializers.Serializer):
    host = HostAnalyticsSerializer()
    events = EventAnalyticsSerializer(many=True)
