"""Booking-related Pydantic schemas."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from labhub.domain.booking_state import BookingStatus


class BookingCreate(BaseModel):
    """Booking proposal submitted by a requester.

    Business rules (purpose, time range, attendees) are enforced by the
    booking validator so that each failure carries its own error code.
    """

    resource_id: UUID
    start_time: datetime
    end_time: datetime
    purpose: str = Field(default="", max_length=1000)
    attendees: int = 1
    notes: str | None = Field(None, max_length=2000)

    @field_validator("start_time", "end_time")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    resource_id: UUID

    requester_id: str
    requester_name: str
    requester_role: str
    requester_avatar: str | None

    start_time: datetime
    end_time: datetime
    purpose: str
    attendees: int
    notes: str | None

    status: BookingStatus
    created_at: datetime


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int


class BookingFilters(BaseModel):
    """Filters accepted by booking list queries."""

    status: BookingStatus | None = None
    resource_id: UUID | None = None
    requester_id: str | None = None
    kind: str | None = None
    q: str | None = None  # matches resource name, requester name or purpose
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=100)
