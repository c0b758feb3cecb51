"""In-memory resource catalog and booking store.

Used by the test-suite and for running the lifecycle without a database.
An ``asyncio.Lock`` makes the status compare-and-swap atomic. Reads and writes
copy bookings so callers never share state with the store, as with a database.
"""

import asyncio
from uuid import UUID

from sqlalchemy import inspect

from labhub.core.exceptions import ConflictError, NotFoundError
from labhub.models.booking import Booking
from labhub.models.resource import Resource
from labhub.schemas.booking import BookingFilters


def _snapshot(booking: Booking) -> Booking:
    return Booking(
        **{attr.key: getattr(booking, attr.key) for attr in inspect(Booking).column_attrs}
    )


class InMemoryResourceCatalog:
    def __init__(self, resources: list[Resource] | None = None) -> None:
        self._resources: dict[UUID, Resource] = {}
        for resource in resources or []:
            self.add(resource)

    def add(self, resource: Resource) -> Resource:
        self._resources[resource.id] = resource
        return resource

    def remove(self, resource_id: UUID) -> None:
        self._resources.pop(resource_id, None)

    async def get_resource(self, resource_id: UUID) -> Resource | None:
        return self._resources.get(resource_id)


class InMemoryBookingStore:
    def __init__(self, catalog: InMemoryResourceCatalog | None = None) -> None:
        self.catalog = catalog
        self._bookings: dict[UUID, Booking] = {}
        self._lock = asyncio.Lock()
        self.writes = 0

    async def insert_booking(self, booking: Booking) -> UUID:
        async with self._lock:
            if booking.id in self._bookings:
                raise ConflictError(f"Booking {booking.id} already exists")
            self._bookings[booking.id] = _snapshot(booking)
            self.writes += 1
        return booking.id

    async def get_booking(self, booking_id: UUID) -> Booking | None:
        booking = self._bookings.get(booking_id)
        return _snapshot(booking) if booking is not None else None

    async def update_booking_status(
        self, booking_id: UUID, expected_status: str, new_status: str
    ) -> Booking:
        async with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking", str(booking_id))
            if booking.status != expected_status:
                raise ConflictError(
                    f"Booking status changed to '{booking.status}' before this update",
                    current_status=booking.status,
                )
            booking.status = new_status
            self.writes += 1
            return _snapshot(booking)

    async def list_bookings(self, filters: BookingFilters) -> tuple[list[Booking], int]:
        matches = [b for b in self._bookings.values() if await self._matches(b, filters)]
        matches.sort(key=lambda b: b.start_time, reverse=True)
        page = matches[filters.offset : filters.offset + filters.limit]
        return [_snapshot(b) for b in page], len(matches)

    async def _matches(self, booking: Booking, filters: BookingFilters) -> bool:
        if filters.status and booking.status != filters.status.value:
            return False
        if filters.resource_id and booking.resource_id != filters.resource_id:
            return False
        if filters.requester_id and booking.requester_id != filters.requester_id:
            return False

        resource = None
        if self.catalog and (filters.kind or filters.q):
            resource = await self.catalog.get_resource(booking.resource_id)
        if filters.kind and (resource is None or resource.kind != filters.kind):
            return False
        if filters.q:
            needle = filters.q.strip().lower()
            haystack = [booking.requester_name, booking.purpose]
            if resource is not None:
                haystack.append(resource.name)
            if not any(needle in (text or "").lower() for text in haystack):
                return False
        return True
