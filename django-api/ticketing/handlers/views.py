"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.domain.errors import (
    DomainError,
    InsufficientInventoryError,
    NotFoundError,
    ValidationError,
)
from ticketing.handlers.serializers import (
    BookingRequestSerializer,
    BookingStatusSerializer,
    EventAnalyticsSerializer,
    HostDashboardSerializer,
    first_error_message,
)
from ticketing.services import build_analytics_service, build_booking_service

logger = logging.getLogger(__name__)

BOOKING_FAILED = "Failed to create booking"


def failure(http_status: int, message: str) -> Response:
    return Response({"success": False, "error": message}, status=http_status)


class BookingCreateView(APIView):
    """Handler for POST /api/bookings"""

    def post(self, request: Request) -> Response:
        serializer = BookingRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return failure(status.HTTP_400_BAD_REQUEST, first_error_message(serializer.errors))

        try:
            booking_id = build_booking_service().create_pending_booking(serializer.to_request())
        except ValidationError as exc:
            return failure(status.HTTP_400_BAD_REQUEST, exc.message)
        except InsufficientInventoryError as exc:
            return failure(status.HTTP_409_CONFLICT, exc.message)
        except NotFoundError as exc:
            logger.warning("Booking rejected: %s", exc)
            return failure(status.HTTP_404_NOT_FOUND, BOOKING_FAILED)
        except DomainError as exc:
            logger.error("Booking creation failed: %s", exc)
            return failure(status.HTTP_500_INTERNAL_SERVER_ERROR, BOOKING_FAILED)
        except Exception:
            logger.exception("Unexpected booking creation error")
            return failure(status.HTTP_500_INTERNAL_SERVER_ERROR, BOOKING_FAILED)

        return Response(
            {
                "success": True,
                "message": "Booking created successfully",
                "bookingId": str(booking_id),
            }
        )


class BookingStatusView(APIView):
    """Handler for PATCH /api/events/{event_id}/bookings/{booking_id}/status"""

    def patch(self, request: Request, event_id: str, booking_id: str) -> Response:
        serializer = BookingStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return failure(status.HTTP_400_BAD_REQUEST, first_error_message(serializer.errors))

        try:
            booking = build_booking_service().update_booking_status(
                event_id, booking_id, serializer.validated_data["status"]
            )
        except ValidationError as exc:
            return failure(status.HTTP_400_BAD_REQUEST, exc.message)
        except NotFoundError as exc:
            return failure(status.HTTP_404_NOT_FOUND, exc.message)
        except DomainError as exc:
            logger.error("Booking status update failed: %s", exc)
            return failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update booking")

        return Response({"success": True, "bookingId": str(booking.id), "status": booking.status})


class EventAnalyticsView(APIView):
    """Handler for GET /api/analytics/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            analytics = build_analytics_service().get_event_analytics(event_id)
        except ValidationError as exc:
            return failure(status.HTTP_400_BAD_REQUEST, exc.message)
        except NotFoundError as exc:
            return failure(status.HTTP_404_NOT_FOUND, exc.message)
        return Response(EventAnalyticsSerializer(analytics).data)


class HostAnalyticsView(APIView):
    """Handler for GET /api/analytics/hosts/{host_id}"""

    def get(self, request: Request, host_id: str) -> Response:
        dashboard = build_analytics_service().get_host_dashboard(host_id)
        return Response(HostDashboardSerializer(dashboard).data)
