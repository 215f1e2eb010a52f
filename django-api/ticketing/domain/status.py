"""Booking status vocabulary and the counting rule built on it."""

from enum import Enum


class BookingStatus(str, Enum):
    """Statuses written by this service. Other writers may use any string."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Compared case-insensitively: payment providers and older clients write
# "paid", "success", "Succeeded" and similar.
CONFIRMED_EQUIVALENT_STATUSES = frozenset(
    {"CONFIRMED", "COMPLETED", "SUCCESS", "SUCCESSFUL", "SUCCEEDED", "PAID"}
)


def is_confirmed_equivalent(status: str | None) -> bool:
    """Return True when the status means the payment went through."""
    if not status:
        return False
    return status.strip().upper() in CONFIRMED_EQUIVALENT_STATUSES


def enters_confirmed_state(previous: str | None, current: str | None) -> bool:
    """Return True only for a transition *into* a confirmed-equivalent status.

    ``previous`` is None for a freshly created booking. Re-saving a booking
    that was already confirmed (including a switch between two
    confirmed-equivalent spellings) is not a transition.
    """
    return is_confirmed_equivalent(current) and not is_confirmed_equivalent(previous)
