"""Booking lifecycle: creation and status transitions.

Each successful operation persists exactly one write and sends exactly one
success notification. A failed transition writes nothing, sends exactly one
error notification and re-raises. Creation failures are reported to the
caller only; presenting them is the caller's job.

Notification delivery never changes an operation's outcome: a sink failure is
logged and the committed write or the original error stands.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from labhub.core.exceptions import AppException, NotFoundError, NotificationError
from labhub.domain.booking_state import BookingStatus, assert_booking_transition
from labhub.domain.booking_validator import validate_booking
from labhub.models.booking import Booking
from labhub.models.resource import Resource
from labhub.schemas.booking import BookingCreate, BookingFilters
from labhub.schemas.user import Requester
from labhub.services.booking_store import BookingStore, ResourceCatalog
from labhub.services.notification_service import NotificationKind, NotificationSink

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# action -> (target status, success title, success message, failure title)
TRANSITION_MESSAGES: dict[str, tuple[BookingStatus, str, str, str]] = {
    "approve": (
        BookingStatus.APPROVED,
        "Booking Approved",
        "The booking has been successfully approved.",
        "Approval Failed",
    ),
    "reject": (
        BookingStatus.REJECTED,
        "Booking Rejected",
        "The booking has been rejected.",
        "Rejection Failed",
    ),
    "cancel": (
        BookingStatus.CANCELLED,
        "Booking Cancelled",
        "The booking has been cancelled.",
        "Cancellation Failed",
    ),
    "complete": (
        BookingStatus.COMPLETED,
        "Booking Completed",
        "The booking has been marked as completed.",
        "Completion Failed",
    ),
}


class BookingLifecycleManager:
    """Creates bookings and moves them through their status lifecycle."""

    def __init__(
        self,
        store: BookingStore,
        catalog: ResourceCatalog,
        notifier: NotificationSink,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.notifier = notifier
        self.clock = clock or _utcnow

    async def create_booking(
        self,
        proposal: BookingCreate,
        requester: Requester,
        resource: Resource | None = None,
    ) -> Booking:
        """Validate and persist a new booking in ``pending`` status.

        Args:
            proposal: Requested resource, time range, purpose and attendees
            requester: Identity creating the booking, snapshotted onto it
            resource: Already-resolved resource; looked up when omitted

        Returns:
            Booking: The persisted booking

        Raises:
            NotFoundError: resource does not exist
            BookingValidationError: proposal broke a booking rule
            StoreError: persistence failed
        """
        if resource is None:
            resource = await self.catalog.get_resource(proposal.resource_id)
            if resource is None:
                raise NotFoundError("Resource", str(proposal.resource_id))

        validate_booking(proposal, resource)

        booking = Booking(
            id=uuid.uuid4(),
            resource_id=resource.id,
            requester_id=requester.id,
            requester_name=requester.name,
            requester_role=requester.role,
            requester_avatar=requester.avatar,
            start_time=proposal.start_time,
            end_time=proposal.end_time,
            purpose=proposal.purpose.strip(),
            attendees=proposal.attendees,
            notes=proposal.notes,
            status=BookingStatus.PENDING.value,
            created_at=self.clock(),
        )
        await self.store.insert_booking(booking)

        logger.info(
            f"Booking created: id={booking.id} resource={resource.id} "
            f"requester={requester.id} attendees={booking.attendees}"
        )
        await self._notify(
            NotificationKind.SUCCESS,
            "Booking Request Submitted",
            "Your booking request has been sent for approval.",
            self._context(booking.id, booking.status),
        )
        return booking

    async def approve(self, booking_id: UUID, actor: Requester | None = None) -> Booking:
        return await self._transition(booking_id, "approve", actor)

    async def reject(self, booking_id: UUID, actor: Requester | None = None) -> Booking:
        return await self._transition(booking_id, "reject", actor)

    async def cancel(self, booking_id: UUID, actor: Requester | None = None) -> Booking:
        return await self._transition(booking_id, "cancel", actor)

    async def complete(self, booking_id: UUID, actor: Requester | None = None) -> Booking:
        return await self._transition(booking_id, "complete", actor)

    async def get_booking(self, booking_id: UUID) -> Booking:
        booking = await self.store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def list_bookings(self, filters: BookingFilters) -> tuple[list[Booking], int]:
        return await self.store.list_bookings(filters)

    async def _transition(
        self, booking_id: UUID, action: str, actor: Requester | None
    ) -> Booking:
        target, title, message, failure_title = TRANSITION_MESSAGES[action]
        actor_id = actor.id if actor else None

        try:
            booking = await self.store.get_booking(booking_id)
            if booking is None:
                raise NotFoundError("Booking", str(booking_id))

            current = booking.status
            assert_booking_transition(current, target.value)
            updated = await self.store.update_booking_status(
                booking_id, current, target.value
            )
        except AppException as e:
            logger.warning(
                f"Booking {action} refused: id={booking_id} actor={actor_id} "
                f"reason={e.code}: {e.detail}"
            )
            await self._notify(
                NotificationKind.ERROR,
                failure_title,
                str(e.detail),
                self._context(booking_id, None, error=e.code),
            )
            raise

        logger.info(
            f"Booking {action}: id={booking_id} {current} → {updated.status} actor={actor_id}"
        )
        await self._notify(
            NotificationKind.SUCCESS,
            title,
            message,
            self._context(booking_id, updated.status),
        )
        return updated

    async def _notify(
        self, kind: NotificationKind, title: str, message: str, context: dict[str, Any]
    ) -> None:
        try:
            await self.notifier.notify(kind, title, message, context)
        except NotificationError as e:
            logger.error(
                f"Notification '{title}' not delivered for booking "
                f"{context.get('booking_id')}: {e.detail}"
            )

    @staticmethod
    def _context(booking_id: UUID, status: str | None, **extra: Any) -> dict[str, Any]:
        context: dict[str, Any] = {"booking_id": str(booking_id)}
        if status is not None:
            context["status"] = status
        context.update(extra)
        return context
