"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code = "error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class BookingValidationError(ValidationError):
    """A booking proposal broke one of the creation rules."""

    code = "booking_invalid"
    default_detail = "Booking request is invalid"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)


class EmptyPurpose(BookingValidationError):
    code = "empty_purpose"
    default_detail = "Please provide a purpose for your booking"


class InvalidTimeRange(BookingValidationError):
    code = "invalid_time_range"
    default_detail = "End time must be after start time"


class AttendeesOutOfRange(BookingValidationError):
    code = "attendees_out_of_range"
    default_detail = "Number of attendees is outside the allowed range"


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidTransition(AppException):
    """Booking status change not allowed from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid booking transition: {current} → {target}",
        )


class ConflictError(AppException):
    """Record changed between read and conditional write."""

    code = "conflict"

    def __init__(
        self,
        detail: str = "The record was modified by another request",
        current_status: str | None = None,
    ) -> None:
        self.current_status = current_status
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreError(AppException):
    """Persistence layer failure."""

    code = "store_error"

    def __init__(self, detail: str = "Booking store is unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class NotificationError(AppException):
    """Notification delivery failure."""

    code = "notification_error"

    def __init__(self, detail: str = "Notification could not be delivered") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "authentication_failed"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "forbidden"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
