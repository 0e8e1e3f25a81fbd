"""
Pytest fixtures for test database, client, authentication and catalog rows.

Tables are created and dropped around every test. The database comes from
TEST_DATABASE_URL; without it a local SQLite file is used. Point it at
PostgreSQL to exercise row locking as well.
"""

import os
from datetime import date, time, timedelta
from typing import AsyncGenerator, Awaitable, Callable

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_academy.db")

# Must be set before the app (and its cached settings) is imported
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.security import create_access_token, hash_password
from app.models import Admin, Booking, BookingStatus, Coach, Program, Student

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

IS_SQLITE = TEST_DATABASE_URL.startswith("sqlite")

# Day used by every booking test
BOOKING_DAY = date.today() + timedelta(days=60)


@pytest.fixture
def session_factory() -> async_sessionmaker:
    return TestSessionLocal


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> Admin:
    admin = Admin(
        email="admin@academy.example.com",
        name="Head Coach",
        hashed_password=hash_password("adminpassword123"),
        role="admin",
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest_asyncio.fixture
async def admin_headers(test_admin: Admin) -> dict:
    token = create_access_token(data={"sub": str(test_admin.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_coach(db_session: AsyncSession) -> Coach:
    coach = Coach(
        name="Rahul Menon",
        email="rahul@academy.example.com",
        specialization="batting",
        experience_years=12,
    )
    db_session.add(coach)
    await db_session.commit()
    await db_session.refresh(coach)
    return coach


@pytest_asyncio.fixture
async def other_coach(db_session: AsyncSession) -> Coach:
    coach = Coach(
        name="Priya Nair",
        email="priya@academy.example.com",
        specialization="spin-bowling",
        experience_years=8,
    )
    db_session.add(coach)
    await db_session.commit()
    await db_session.refresh(coach)
    return coach


@pytest_asyncio.fixture
async def test_program(db_session: AsyncSession) -> Program:
    program = Program(title="Junior Batting Camp", age_group="U-14", duration_weeks=8)
    db_session.add(program)
    await db_session.commit()
    await db_session.refresh(program)
    return program


@pytest_asyncio.fixture
async def test_student(db_session: AsyncSession) -> Student:
    student = Student(name="Arjun Rao", email="arjun@example.com", age=12)
    db_session.add(student)
    await db_session.commit()
    await db_session.refresh(student)
    return student


@pytest_asyncio.fixture
async def booking_payload(test_coach, test_program, test_student) -> dict:
    """JSON body for POST /bookings at 10:00-11:00 on BOOKING_DAY."""
    return {
        "student_id": test_student.id,
        "program_id": test_program.id,
        "coach_id": test_coach.id,
        "booking_date": BOOKING_DAY.isoformat(),
        "start_time": "10:00:00",
        "end_time": "11:00:00",
        "notes": "First session",
    }


@pytest_asyncio.fixture
async def make_booking(
    db_session: AsyncSession, test_coach, test_program, test_student
) -> Callable[..., Awaitable[Booking]]:
    """Insert a booking directly, bypassing the service checks."""
    defaults = {
        "student_id": test_student.id,
        "program_id": test_program.id,
        "coach_id": test_coach.id,
        "booking_date": BOOKING_DAY,
    }

    async def _make(start: time, end: time, status: str = BookingStatus.PENDING.value, **overrides) -> Booking:
        booking = Booking(
            **{**defaults, **overrides},
            start_time=start,
            end_time=end,
            status=status,
        )
        db_session.add(booking)
        await db_session.commit()
        await db_session.refresh(booking)
        return booking

    return _make
