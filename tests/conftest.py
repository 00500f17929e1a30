"""Test configuration and fixtures"""

import os

# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_KEY"] = "test-admin-key"
os.environ["NOTIFICATION_WEBHOOK_URL"] = ""
os.environ["PUBLIC_BASE_URL"] = "https://reservo.test"
os.environ["CIVIL_TIMEZONE"] = "Europe/Tirane"

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from reservo.main import app
from reservo.database import Base, get_db
from reservo.models.tenant import Tenant
from reservo.models.user import User, UserRole
from reservo.models.reservation import Reservation, ReservationStatus
from reservo.api.auth import create_access_token, get_password_hash
from reservo.api.deps import get_clock, get_dispatcher
from tests.support import FixedClock, RecordingDispatcher, civil


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def clock():
    """10:00 on 2025-06-10, restaurant time"""
    return FixedClock(civil(2025, 6, 10, 10, 0))


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
async def test_tenant(test_db):
    """Create a test tenant"""
    tenant = Tenant(
        name="Test Restaurant",
        max_auto_confirm_people=6,
        same_day_cutoff="11:00",
    )
    test_db.add(tenant)
    await test_db.commit()

    return tenant


@pytest.fixture
async def other_tenant(test_db):
    tenant = Tenant(name="Other Restaurant")
    test_db.add(tenant)
    await test_db.commit()

    return tenant


@pytest.fixture
async def test_user(test_db, test_tenant):
    """Restaurant owner"""
    user = User(
        tenant_id=test_tenant.id,
        email="owner@example.com",
        hashed_password=get_password_hash("ownerpass123"),
        full_name="Owner User",
        role=UserRole.RESTAURANT_ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_staff_user(test_db, test_tenant):
    user = User(
        tenant_id=test_tenant.id,
        email="staff@example.com",
        hashed_password=get_password_hash("staffpass123"),
        full_name="Staff User",
        role=UserRole.STAFF_VIEWER,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_admin_user(test_db):
    """Create a super admin user"""
    user = User(
        email="admin@example.com",
        hashed_password=get_password_hash("adminpass123"),
        full_name="Admin User",
        role=UserRole.SUPER_ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
def make_reservation(test_db):
    """Insert a reservation row directly, bypassing intake"""
    async def _make(
        tenant,
        status=ReservationStatus.CONFIRMED,
        service_date=date(2025, 6, 12),
        service_time="19:00",
        party_size=2,
        phone="+355690000001",
        customer_name="Ana Kola",
    ):
        reservation = Reservation(
            tenant_id=tenant.id,
            customer_name=customer_name,
            phone=phone,
            service_date=service_date,
            service_time=service_time,
            party_size=party_size,
            status=status,
            decision_reason="test",
        )
        test_db.add(reservation)
        await test_db.commit()
        await test_db.refresh(reservation)
        return reservation

    return _make


@pytest.fixture
async def client(test_db, clock, dispatcher):
    """Create test client with overridden database, clock and dispatcher"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.state.readiness.database_ready = True

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, test_user):
    """Client authenticated as the restaurant owner"""
    token = create_access_token(test_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
async def staff_client(client, test_staff_user):
    token = create_access_token(test_staff_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client
