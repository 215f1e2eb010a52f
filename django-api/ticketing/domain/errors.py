"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_BOOKING_ID = "INVALID_BOOKING_ID"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_TYPE_NOT_FOUND = "TICKET_TYPE_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    HOST_NOT_FOUND = "HOST_NOT_FOUND"
    TRANSIENT_STORE_ERROR = "TRANSIENT_STORE_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Bad input. Raised before any write happens."""


class NotFoundError(DomainError):
    """A referenced record does not exist."""


class InvalidBookingRequestError(ValidationError):
    """Raised when a purchase request is incomplete or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_REQUEST, message=message)


class InvalidEventIdError(ValidationError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidBookingIdError(ValidationError):
    """Raised when a booking ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BOOKING_ID,
            message="Invalid booking ID format",
        )


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class TicketTypeNotFoundError(NotFoundError):
    """Raised when the inventory document for a ticket type is missing."""

    def __init__(self, ticket_type_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_TYPE_NOT_FOUND,
            message="Ticket type not found",
        )
        self.ticket_type_id = ticket_type_id


class BookingNotFoundError(NotFoundError):
    """Raised when a booking is not in the ledger."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class InsufficientInventoryError(DomainError):
    """Raised when fewer tickets remain than were requested."""

    def __init__(self, available: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message=f"Only {available} tickets available",
        )
        self.available = available


class HostResolutionError(DomainError):
    """Raised when a booking cannot be attributed to a host."""

    def __init__(self, event_id: str, booking_id: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.HOST_NOT_FOUND,
            message="Host ID not found in event data",
        )
        self.event_id = event_id
        self.booking_id = booking_id


class TransientStoreError(DomainError):
    """Raised when the store reports contention. Safe to retry from the top."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TRANSIENT_STORE_ERROR,
            message="Storage temporarily unavailable",
        )
