"""Test configuration and fixtures"""

import os

# Must be set before the app imports its settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RESERVATION_SWEEP_ENABLED", "false")

from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.main import app  # noqa: E402
from app.database import Base, get_db, get_session_factory  # noqa: E402
from app.models.room import Room, RoomType, RoomStatus  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402
from app.api.auth import create_access_token, get_password_hash  # noqa: E402


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Single shared in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory):
    """Session for arranging data and checking results"""
    async with session_factory() as session:
        yield session


async def _create_user(db, email, role, full_name):
    user = User(
        id=uuid4(),
        email=email,
        hashed_password=get_password_hash("testpass123"),
        full_name=full_name,
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def test_guest(test_db):
    return await _create_user(test_db, "guest@example.com", UserRole.GUEST, "Test Guest")


@pytest.fixture
async def other_guest(test_db):
    return await _create_user(test_db, "other@example.com", UserRole.GUEST, "Other Guest")


@pytest.fixture
async def test_receptionist(test_db):
    return await _create_user(test_db, "desk@example.com", UserRole.RECEPTIONIST, "Front Desk")


@pytest.fixture
async def test_housekeeper(test_db):
    return await _create_user(test_db, "hk@example.com", UserRole.HOUSEKEEPING, "Housekeeper")


@pytest.fixture
async def deluxe_type(test_db):
    """Deluxe rooms: $100 a night with a 10% discount"""
    room_type = RoomType(
        id=uuid4(),
        name="Deluxe",
        base_price=100.0,
        discount=10.0,
        max_adults=2,
        max_children=2,
    )
    test_db.add(room_type)
    await test_db.commit()
    return room_type


@pytest.fixture
async def deluxe_rooms(test_db, deluxe_type):
    rooms = [
        Room(id=uuid4(), room_number="201", room_type_id=deluxe_type.id, floor=2, status=RoomStatus.AVAILABLE),
        Room(id=uuid4(), room_number="202", room_type_id=deluxe_type.id, floor=2, status=RoomStatus.AVAILABLE),
    ]
    for room in rooms:
        test_db.add(room)
    await test_db.commit()
    return rooms


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
async def client(session_factory):
    """Create test client with overridden database"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def guest_client(client, test_guest):
    """Client authenticated as a guest"""
    client.headers.update(auth_headers(test_guest))
    return client


@pytest.fixture
def guest_headers(test_guest):
    return auth_headers(test_guest)


@pytest.fixture
def other_guest_headers(other_guest):
    return auth_headers(other_guest)


@pytest.fixture
def staff_headers(test_receptionist):
    return auth_headers(test_receptionist)


@pytest.fixture
def housekeeping_headers(test_housekeeper):
    return auth_headers(test_housekeeper)
