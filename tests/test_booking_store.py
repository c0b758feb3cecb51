import uuid
from datetime import timedelta

import pytest

from conftest import START, make_proposal, make_resource
from labhub.core.exceptions import ConflictError, InvalidTransition, NotFoundError
from labhub.schemas.booking import BookingFilters
from labhub.services.booking_service import BookingLifecycleManager
from labhub.services.booking_store import SqlAlchemyBookingStore, SqlAlchemyResourceCatalog


@pytest.fixture
async def sql_catalog(db_session):
    return SqlAlchemyResourceCatalog(db_session)


@pytest.fixture
def sql_store(db_session):
    return SqlAlchemyBookingStore(db_session)


@pytest.fixture
def sql_manager(sql_store, sql_catalog, notifier):
    return BookingLifecycleManager(sql_store, sql_catalog, notifier)


@pytest.fixture
async def lab(sql_catalog):
    return await sql_catalog.add_resource(make_resource(name="Physics Lab", capacity=8))


class TestSqlAlchemyResourceCatalog:
    async def test_add_and_get(self, sql_catalog, lab):
        found = await sql_catalog.get_resource(lab.id)
        assert found is not None
        assert found.name == "Physics Lab"
        assert found.capacity == 8

    async def test_missing_resource(self, sql_catalog):
        assert await sql_catalog.get_resource(uuid.uuid4()) is None

    async def test_list_and_set_status(self, sql_catalog, lab):
        await sql_catalog.add_resource(make_resource(name="Centrifuge", kind="equipment"))

        labs = await sql_catalog.list_resources(kind="lab")
        assert [r.name for r in labs] == ["Physics Lab"]

        await sql_catalog.set_status(lab.id, "maintenance")
        in_maintenance = await sql_catalog.list_resources(status="maintenance")
        assert [r.id for r in in_maintenance] == [lab.id]

    async def test_set_status_unknown(self, sql_catalog):
        with pytest.raises(NotFoundError):
            await sql_catalog.set_status(uuid.uuid4(), "maintenance")


class TestSqlAlchemyBookingStore:
    async def test_create_and_reload(self, sql_manager, sql_store, lab, student):
        booking = await sql_manager.create_booking(make_proposal(lab), student)

        loaded = await sql_store.get_booking(booking.id)
        assert loaded.status == "pending"
        assert loaded.requester_name == student.name
        assert loaded.purpose == "Chemistry experiment"

    async def test_conditional_update(self, sql_manager, sql_store, lab, student):
        booking = await sql_manager.create_booking(make_proposal(lab), student)

        updated = await sql_store.update_booking_status(booking.id, "pending", "approved")
        assert updated.status == "approved"

        with pytest.raises(ConflictError) as exc:
            await sql_store.update_booking_status(booking.id, "pending", "rejected")
        assert exc.value.current_status == "approved"
        assert (await sql_store.get_booking(booking.id)).status == "approved"

    async def test_update_missing_booking(self, sql_store):
        with pytest.raises(NotFoundError):
            await sql_store.update_booking_status(uuid.uuid4(), "pending", "approved")

    async def test_lifecycle_over_database(self, sql_manager, lab, student):
        booking = await sql_manager.create_booking(make_proposal(lab), student)
        assert (await sql_manager.approve(booking.id)).status == "approved"
        assert (await sql_manager.complete(booking.id)).status == "completed"
        with pytest.raises(InvalidTransition):
            await sql_manager.cancel(booking.id)

    async def test_list_filters(self, sql_manager, sql_catalog, lab, student, supervisor):
        scope = await sql_catalog.add_resource(
            make_resource(name="Electron Microscope", kind="equipment", capacity=2)
        )
        first = await sql_manager.create_booking(make_proposal(lab), student)
        second = await sql_manager.create_booking(
            make_proposal(
                scope,
                start_time=START + timedelta(days=2),
                end_time=START + timedelta(days=2, hours=3),
                purpose="Cell imaging",
                attendees=1,
            ),
            supervisor,
        )
        await sql_manager.reject(first.id)

        bookings, total = await sql_manager.list_bookings(BookingFilters())
        assert total == 2
        assert [b.id for b in bookings] == [second.id, first.id]

        rejected, total = await sql_manager.list_bookings(BookingFilters(status="rejected"))
        assert total == 1 and rejected[0].id == first.id

        equipment, _ = await sql_manager.list_bookings(BookingFilters(kind="equipment"))
        assert [b.id for b in equipment] == [second.id]

        by_name, _ = await sql_manager.list_bookings(BookingFilters(q="microscope"))
        assert [b.id for b in by_name] == [second.id]

        by_requester, _ = await sql_manager.list_bookings(BookingFilters(q="sam"))
        assert [b.id for b in by_requester] == [first.id]

        paged, total = await sql_manager.list_bookings(BookingFilters(limit=1, offset=1))
        assert total == 2 and [b.id for b in paged] == [first.id]

    async def test_search_wildcards_match_literally(self, sql_manager, lab, student):
        diluted = await sql_manager.create_booking(
            make_proposal(lab, purpose="Buffer prep at 50% strength"), student
        )
        await sql_manager.create_booking(make_proposal(lab, purpose="Titration"), student)

        percent, total = await sql_manager.list_bookings(BookingFilters(q="%"))
        assert total == 1 and [b.id for b in percent] == [diluted.id]

        underscore, total = await sql_manager.list_bookings(BookingFilters(q="_"))
        assert underscore == [] and total == 0
