"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from labhub.api.deps import (
    get_booking_manager,
    require_booking_creator,
    require_booking_manager,
    require_booking_viewer,
)
from labhub.core.exceptions import AuthorizationError
from labhub.core.permissions import Permission, has_permission
from labhub.domain.booking_state import BookingStatus
from labhub.models.booking import Booking
from labhub.schemas.booking import (
    BookingCreate,
    BookingFilters,
    BookingListResponse,
    BookingResponse,
)
from labhub.schemas.user import Requester
from labhub.services.booking_service import BookingLifecycleManager

router = APIRouter()

Manager = Annotated[BookingLifecycleManager, Depends(get_booking_manager)]


def _ensure_can_view(booking: Booking, requester: Requester) -> None:
    if booking.requester_id == requester.id:
        return
    if has_permission(requester.role, Permission.VIEW_ALL_BOOKINGS):
        return
    raise AuthorizationError("You don't have permission to access this booking")


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[Requester, Depends(require_booking_creator)],
    manager: Manager,
) -> Booking:
    """Submit a booking request; it starts out pending approval."""
    return await manager.create_booking(booking_data, current_user)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    current_user: Annotated[Requester, Depends(require_booking_viewer)],
    manager: Manager,
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    resource_id: UUID | None = None,
    requester_id: str | None = None,
    kind: str | None = Query(default=None, pattern="^(lab|equipment|classroom)$"),
    q: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """List bookings, newest start time first.

    Callers without the view-all permission only ever see their own bookings.
    """
    if not has_permission(current_user.role, Permission.VIEW_ALL_BOOKINGS):
        requester_id = current_user.id

    filters = BookingFilters(
        status=status_filter,
        resource_id=resource_id,
        requester_id=requester_id,
        kind=kind,
        q=q,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    bookings, total = await manager.list_bookings(filters)

    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[Requester, Depends(require_booking_viewer)],
    manager: Manager,
) -> Booking:
    """Get a booking by ID."""
    booking = await manager.get_booking(booking_id)
    _ensure_can_view(booking, current_user)
    return booking


@router.post("/{booking_id}/approve", response_model=BookingResponse)
async def approve_booking(
    booking_id: UUID,
    current_user: Annotated[Requester, Depends(require_booking_manager)],
    manager: Manager,
) -> Booking:
    """Approve a pending booking (supervisors and admins)."""
    return await manager.approve(booking_id, actor=current_user)


@router.post("/{booking_id}/reject", response_model=BookingResponse)
async def reject_booking(
    booking_id: UUID,
    current_user: Annotated[Requester, Depends(require_booking_manager)],
    manager: Manager,
) -> Booking:
    """Reject a pending booking (supervisors and admins)."""
    return await manager.reject(booking_id, actor=current_user)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: UUID,
    current_user: Annotated[Requester, Depends(require_booking_manager)],
    manager: Manager,
) -> Booking:
    """Mark an approved booking as completed (supervisors and admins)."""
    return await manager.complete(booking_id, actor=current_user)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    current_user: Annotated[Requester, Depends(require_booking_viewer)],
    manager: Manager,
) -> Booking:
    """Cancel a pending or approved booking.

    Requesters may cancel their own bookings; managers may cancel any.
    """
    if not has_permission(current_user.role, Permission.MANAGE_BOOKINGS):
        booking = await manager.get_booking(booking_id)
        owns = booking.requester_id == current_user.id
        if not (owns and has_permission(current_user.role, Permission.CANCEL_OWN_BOOKING)):
            raise AuthorizationError("Only the requester or a supervisor can cancel this booking")

    return await manager.cancel(booking_id, actor=current_user)
