"""Shared fixtures: one SQLite database per test, authenticated API client."""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from schoolhub.core.database import Base, get_db
from schoolhub.core.security import create_access_token
from schoolhub.core.settings import settings
from schoolhub.main import app
from schoolhub.models import DayOfWeek, MembershipPlan, Student, StudentSchedule


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'schoolhub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def bearer(username: str, role: str) -> dict:
    token = create_access_token({"sub": username, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return bearer(settings.admin_email, "ADMIN")


@pytest.fixture
def staff_headers():
    return bearer(settings.staff_email, "STAFF")


@pytest.fixture
def parent_headers():
    return bearer("parent@example.com", "PARENT")


@pytest.fixture
def make_student(db):
    """Create a student on a fresh plan with the given weekly quota."""

    async def _make_student(
        first_name: str,
        last_name: str,
        days_per_week: int,
        is_active: bool = True,
        plan_active: bool = True,
    ) -> Student:
        plan = MembershipPlan(
            name=f"{days_per_week} days",
            days_per_week=days_per_week,
            monthly_price=Decimal("100.00"),
            is_active=plan_active,
        )
        db.add(plan)
        await db.flush()
        student = Student(
            first_name=first_name,
            last_name=last_name,
            is_active=is_active,
            membership_plan_id=plan.id,
        )
        db.add(student)
        await db.commit()
        return student

    return _make_student


@pytest.fixture
def add_slot(db):
    """Store a schedule row directly."""

    async def _add_slot(student: Student, day: DayOfWeek, is_locked: bool = False) -> StudentSchedule:
        slot = StudentSchedule(student_id=student.id, day_of_week=day, is_locked=is_locked)
        db.add(slot)
        await db.commit()
        return slot

    return _add_slot
