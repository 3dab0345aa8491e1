"""
Centralized Test Configuration.
"""

import pytest
from datetime import date
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.tracknship.main import app
from backend.tracknship.db.session import get_db, Base
from backend.tracknship.core.redis_client import get_redis
from backend.tracknship.core.jwt import create_access_token
from backend.tracknship.models.booking import Booking
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.review import Review
from backend.tracknship.models.user import User

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        return not self._closed

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def flushdb(self):
        self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture
def redis_mock():
    return MockRedis()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite leaves foreign keys unenforced unless asked
    @event.listens_for(test_engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def apply_overrides(session_factory, redis_mock):
    """Point the app at the test database and the mock Redis."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_redis():
        return redis_mock

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def auth_headers():
    """Build an Authorization header for an email."""
    def _auth_headers(email: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(email)}"}
    return _auth_headers


@pytest.fixture
def make_user(db_session):
    """Insert a user directly in the store."""
    async def _make_user(email: str, role: UserRole = UserRole.CUSTOMER, delivered_count: int = 0, **fields) -> User:
        user = User(
            email=email,
            name=fields.pop("name", email.split("@")[0]),
            role=role,
            delivered_count=delivered_count,
            **fields
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_booking(db_session):
    """Insert a booking directly in the store."""
    async def _make_booking(
        owner_email: str,
        status: BookingStatus = BookingStatus.PENDING,
        delivery_man_id: int = None,
        requested_delivery_date: date = date(2026, 11, 1),
        **fields
    ) -> Booking:
        booking = Booking(
            owner_email=owner_email,
            parcel_type=fields.pop("parcel_type", "Documents"),
            parcel_weight=fields.pop("parcel_weight", 1.5),
            receiver_name=fields.pop("receiver_name", "Receiver"),
            receiver_phone=fields.pop("receiver_phone", "+8801700000000"),
            delivery_address=fields.pop("delivery_address", "12 Lake Road, Dhaka"),
            requested_delivery_date=requested_delivery_date,
            price=fields.pop("price", 150.0),
            status=status,
            delivery_man_id=delivery_man_id,
            **fields
        )
        db_session.add(booking)
        await db_session.commit()
        await db_session.refresh(booking)
        return booking
    return _make_booking


@pytest.fixture
def make_review(db_session):
    """Insert a review directly in the store."""
    async def _make_review(booking: Booking, rating: float, comment: str = None) -> Review:
        review = Review(
            booking_id=booking.id,
            delivery_man_id=booking.delivery_man_id,
            reviewer_email=booking.owner_email,
            rating=rating,
            comment=comment,
        )
        db_session.add(review)
        await db_session.commit()
        await db_session.refresh(review)
        return review
    return _make_review


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@tracknship.test", role=UserRole.ADMIN)


@pytest.fixture
async def customer(make_user):
    return await make_user("customer@tracknship.test", role=UserRole.CUSTOMER, phone="+8801711111111")


@pytest.fixture
async def delivery_man(make_user):
    return await make_user("rider@tracknship.test", role=UserRole.DELIVERYMAN, delivered_count=3)


@pytest.fixture
async def other_delivery_man(make_user):
    return await make_user("rider2@tracknship.test", role=UserRole.DELIVERYMAN, delivered_count=7)
