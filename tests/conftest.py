import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("DEBUG", "false")

import uuid
from datetime import UTC, datetime, timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import labhub.models  # noqa: F401
from labhub.api.deps import get_notification_sink
from labhub.core.exceptions import NotificationError
from labhub.core.security import create_access_token
from labhub.database import Base, get_db
from labhub.main import app
from labhub.models.resource import Resource
from labhub.schemas.booking import BookingCreate
from labhub.schemas.user import Requester
from labhub.services.booking_service import BookingLifecycleManager
from labhub.services.memory_store import InMemoryBookingStore, InMemoryResourceCatalog
from labhub.services.notification_service import RecordingNotificationSink

START = datetime(2024, 1, 10, 9, 0, tzinfo=UTC)


class FailingNotificationSink(RecordingNotificationSink):
    """Records every attempt, then fails delivery for the given kinds."""

    def __init__(self, failing_kinds) -> None:
        super().__init__()
        self.failing_kinds = set(failing_kinds)

    async def notify(self, kind, title, message, context=None) -> None:
        await super().notify(kind, title, message, context)
        if kind in self.failing_kinds:
            raise NotificationError("webhook down")


def make_resource(capacity: int = 10, status: str = "available", **kwargs) -> Resource:
    return Resource(
        id=kwargs.pop("id", uuid.uuid4()),
        name=kwargs.pop("name", "Chemistry Lab A"),
        kind=kwargs.pop("kind", "lab"),
        capacity=capacity,
        status=status,
        features=kwargs.pop("features", []),
        requires_approval=True,
        **kwargs,
    )


def make_proposal(resource: Resource, **overrides) -> BookingCreate:
    data = {
        "resource_id": resource.id,
        "start_time": START,
        "end_time": START + timedelta(hours=2),
        "purpose": "Chemistry experiment",
        "attendees": 2,
    }
    data.update(overrides)
    return BookingCreate(**data)


@pytest.fixture
def resource() -> Resource:
    return make_resource()


@pytest.fixture
def catalog(resource) -> InMemoryResourceCatalog:
    return InMemoryResourceCatalog([resource])


@pytest.fixture
def store(catalog) -> InMemoryBookingStore:
    return InMemoryBookingStore(catalog)


@pytest.fixture
def notifier() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def manager(store, catalog, notifier) -> BookingLifecycleManager:
    return BookingLifecycleManager(store, catalog, notifier)


@pytest.fixture
def student() -> Requester:
    return Requester(id="user-student", name="Sam Student", role="student")


@pytest.fixture
def supervisor() -> Requester:
    return Requester(id="user-supervisor", name="Lab Supervisor", role="lab_supervisor")


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, notifier):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_sink] = lambda: notifier
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user_id: str, role: str, name: str | None = None) -> dict[str, str]:
    token = create_access_token({"sub": user_id, "name": name or user_id, "user_role": role})
    return {"Authorization": f"Bearer {token}"}
