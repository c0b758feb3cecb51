"""Booking proposal validation.

Rules are checked in a fixed order and the first failure wins:

1. purpose must be non-empty once surrounding whitespace is stripped
2. start_time must be strictly before end_time
3. attendees must be between 1 and the resource capacity

Resource status is deliberately not consulted here: a resource's status is a
maintenance flag owned by the catalog, not a live calendar indicator.
"""

from datetime import datetime
from typing import Protocol

from labhub.core.exceptions import (
    AttendeesOutOfRange,
    BookingValidationError,
    EmptyPurpose,
    InvalidTimeRange,
)


class BookingProposal(Protocol):
    purpose: str
    start_time: datetime
    end_time: datetime
    attendees: int


class BookableResource(Protocol):
    capacity: int


def validate_booking(proposal: BookingProposal, resource: BookableResource) -> None:
    """Raise the first rule a proposal breaks, or return None.

    Raises:
        EmptyPurpose: purpose is blank
        InvalidTimeRange: start_time is not before end_time
        AttendeesOutOfRange: attendees < 1 or above resource capacity
    """
    if not (proposal.purpose or "").strip():
        raise EmptyPurpose()

    if not proposal.start_time < proposal.end_time:
        raise InvalidTimeRange()

    if proposal.attendees < 1:
        raise AttendeesOutOfRange("At least one attendee is required")
    if proposal.attendees > resource.capacity:
        raise AttendeesOutOfRange(f"Maximum {resource.capacity} attendees allowed")


def check_booking(
    proposal: BookingProposal, resource: BookableResource
) -> BookingValidationError | None:
    """Return the validation error for a proposal instead of raising it."""
    try:
        validate_booking(proposal, resource)
    except BookingValidationError as e:
        return e
    return None
