"""Persistence collaborators for the booking lifecycle.

The lifecycle manager only talks to the two protocols below. The SQLAlchemy
implementations issue single reads and single conditional writes; they never
hold locks across calls.
"""

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.core.exceptions import ConflictError, NotFoundError, StoreError
from labhub.models.booking import Booking
from labhub.models.resource import Resource
from labhub.schemas.booking import BookingFilters

logger = logging.getLogger(__name__)


def _like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in ``term`` matched literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ResourceCatalog(Protocol):
    async def get_resource(self, resource_id: UUID) -> Resource | None: ...


class BookingStore(Protocol):
    async def insert_booking(self, booking: Booking) -> UUID: ...

    async def get_booking(self, booking_id: UUID) -> Booking | None: ...

    async def update_booking_status(
        self, booking_id: UUID, expected_status: str, new_status: str
    ) -> Booking:
        """Set ``new_status`` only if the stored status is ``expected_status``.

        Raises:
            ConflictError: stored status differs from ``expected_status``
            NotFoundError: booking no longer exists
        """
        ...

    async def list_bookings(self, filters: BookingFilters) -> tuple[list[Booking], int]: ...


class SqlAlchemyResourceCatalog:
    """Resource catalog backed by the ``resources`` table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_resource(self, resource_id: UUID) -> Resource | None:
        try:
            result = await self.db.execute(select(Resource).where(Resource.id == resource_id))
        except SQLAlchemyError as e:
            raise StoreError(f"Resource lookup failed: {e}") from e
        return result.scalar_one_or_none()

    async def add_resource(self, resource: Resource) -> Resource:
        self.db.add(resource)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Resource insert failed: {e}") from e
        return resource

    async def list_resources(
        self, kind: str | None = None, status: str | None = None
    ) -> list[Resource]:
        query = select(Resource)
        if kind:
            query = query.where(Resource.kind == kind)
        if status:
            query = query.where(Resource.status == status)
        try:
            result = await self.db.execute(query.order_by(Resource.name))
        except SQLAlchemyError as e:
            raise StoreError(f"Resource query failed: {e}") from e
        return list(result.scalars().all())

    async def set_status(self, resource_id: UUID, status: str) -> Resource:
        resource = await self.get_resource(resource_id)
        if not resource:
            raise NotFoundError("Resource", str(resource_id))
        resource.status = status
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Resource update failed: {e}") from e
        return resource


class SqlAlchemyBookingStore:
    """Booking store backed by the ``bookings`` table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert_booking(self, booking: Booking) -> UUID:
        self.db.add(booking)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Booking insert failed: {e}") from e
        return booking.id

    async def get_booking(self, booking_id: UUID) -> Booking | None:
        try:
            result = await self.db.execute(
                select(Booking)
                .where(Booking.id == booking_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Booking lookup failed: {e}") from e
        return result.scalar_one_or_none()

    async def update_booking_status(
        self, booking_id: UUID, expected_status: str, new_status: str
    ) -> Booking:
        try:
            result = await self.db.execute(
                update(Booking)
                .where(Booking.id == booking_id, Booking.status == expected_status)
                .values(status=new_status)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Booking status update failed: {e}") from e

        if result.rowcount == 0:
            current = await self.get_booking(booking_id)
            if current is None:
                raise NotFoundError("Booking", str(booking_id))
            logger.warning(
                f"Conditional update lost: booking={booking_id} "
                f"expected={expected_status} actual={current.status}"
            )
            raise ConflictError(
                f"Booking status changed to '{current.status}' before this update",
                current_status=current.status,
            )

        booking = await self.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def list_bookings(self, filters: BookingFilters) -> tuple[list[Booking], int]:
        query = select(Booking)

        if filters.kind or filters.q:
            query = query.outerjoin(Resource, Resource.id == Booking.resource_id)
        if filters.status:
            query = query.where(Booking.status == filters.status.value)
        if filters.resource_id:
            query = query.where(Booking.resource_id == filters.resource_id)
        if filters.requester_id:
            query = query.where(Booking.requester_id == filters.requester_id)
        if filters.kind:
            query = query.where(Resource.kind == filters.kind)
        if filters.q:
            pattern = _like_pattern(filters.q.strip())
            query = query.where(
                or_(
                    Resource.name.ilike(pattern, escape="\\"),
                    Booking.requester_name.ilike(pattern, escape="\\"),
                    Booking.purpose.ilike(pattern, escape="\\"),
                )
            )

        try:
            count_result = await self.db.execute(
                select(func.count()).select_from(query.subquery())
            )
            total = count_result.scalar() or 0

            result = await self.db.execute(
                query.order_by(Booking.start_time.desc())
                .offset(filters.offset)
                .limit(filters.limit)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Booking query failed: {e}") from e

        return list(result.scalars().all()), total
