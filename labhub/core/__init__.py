"""Core utilities and security modules."""

from labhub.core.exceptions import (
    AppException,
    AttendeesOutOfRange,
    AuthenticationError,
    AuthorizationError,
    BookingValidationError,
    ConflictError,
    EmptyPurpose,
    InvalidTimeRange,
    InvalidTransition,
    NotFoundError,
    NotificationError,
    StoreError,
    ValidationError,
)

__all__ = [
    "AppException",
    "AttendeesOutOfRange",
    "AuthenticationError",
    "AuthorizationError",
    "BookingValidationError",
    "ConflictError",
    "EmptyPurpose",
    "InvalidTimeRange",
    "InvalidTransition",
    "NotFoundError",
    "NotificationError",
    "StoreError",
    "ValidationError",
]
