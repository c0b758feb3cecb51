"""Pydantic schemas for request/response validation."""

from labhub.schemas.booking import (
    BookingCreate,
    BookingFilters,
    BookingListResponse,
    BookingResponse,
)
from labhub.schemas.resource import (
    ResourceCreate,
    ResourceKind,
    ResourceResponse,
    ResourceStatus,
    ResourceStatusUpdate,
)
from labhub.schemas.user import Requester

__all__ = [
    # Booking
    "BookingCreate",
    "BookingFilters",
    "BookingListResponse",
    "BookingResponse",
    # Resource
    "ResourceCreate",
    "ResourceKind",
    "ResourceResponse",
    "ResourceStatus",
    "ResourceStatusUpdate",
    # User
    "Requester",
]
