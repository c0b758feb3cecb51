"""Booking state machine.

States: pending → approved → completed, with rejected and cancelled as
the other exits. rejected, completed and cancelled are terminal.
"""

from enum import Enum

from labhub.core.exceptions import InvalidTransition


class BookingStatus(str, Enum):
    """Booking request status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"approved", "rejected", "cancelled"},
    "approved": {"completed", "cancelled"},
    "rejected": set(),
    "completed": set(),
    "cancelled": set(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in BOOKING_TRANSITIONS.items() if not targets
)


def _value(status: str | BookingStatus) -> str:
    return status.value if isinstance(status, BookingStatus) else status


def can_transition(current: str | BookingStatus, target: str | BookingStatus) -> bool:
    return _value(target) in BOOKING_TRANSITIONS.get(_value(current), set())


def assert_booking_transition(current: str | BookingStatus, target: str | BookingStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(_value(current), _value(target))
