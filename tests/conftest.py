"""Shared fixtures and utilities for tests."""

import os
import tempfile

# Settings are read at import time, so the environment comes first.
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
os.environ.setdefault("REFRESH_TOKEN_EXPIRE_DAYS", "30")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JSON_LOGS", "false")
os.environ.setdefault("EMAIL_NOTIFICATIONS_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "jobsphere-test-uploads"))

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import database.models  # noqa: F401  registers tables
from database.engine import Base
from database.models.companies import Company
from database.models.jobs import Job, JobStatus
from database.models.notifications import Notification
from database.models.users import User, UserRole
from core.security import hash_password

TEST_PASSWORD = "Secret123!"

# bcrypt is slow on purpose; hash once for every fixture user
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    """Session used both to arrange data and to call the services."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def make_user(session):
    """Factory for persisted users."""
    counter = {"n": 0}

    async def _make_user(role: UserRole = UserRole.JOB_SEEKER, **overrides) -> User:
        counter["n"] += 1
        values = {
            "email": f"{role.value}{counter['n']}@example.com",
            "password_hash": _PASSWORD_HASH,
            "first_name": "Test",
            "last_name": f"User{counter['n']}",
            "role": role,
            "phone": "+1 555 000 0000",
            "is_enabled": True,
        }
        values.update(overrides)
        user = User(**values)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make_user


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(UserRole.ADMIN, first_name="Ada", last_name="Admin")


@pytest_asyncio.fixture
async def employer(make_user) -> User:
    return await make_user(UserRole.EMPLOYER, first_name="Erin", last_name="Employer")


@pytest_asyncio.fixture
async def job_seeker(make_user) -> User:
    return await make_user(
        UserRole.JOB_SEEKER,
        first_name="Sam",
        last_name="Seeker",
        resume_path="resumes/profile.pdf",
    )


@pytest.fixture
def make_company(session):
    """Factory for companies owned by a given employer."""

    async def _make_company(owner: User, verified: bool = False, **overrides) -> Company:
        values = {
            "employer_id": owner.id,
            "name": "Acme Corp",
            "address": "1 Main Street",
            "payment_verified": verified,
        }
        values.update(overrides)
        company = Company(**values)
        session.add(company)
        await session.commit()
        await session.refresh(company)
        return company

    return _make_company


@pytest.fixture
def make_job(session):
    """Factory for jobs in an arbitrary status, bypassing the workflow."""

    async def _make_job(company: Company, status: JobStatus = JobStatus.ACTIVE, **overrides) -> Job:
        values = {
            "company_id": company.id,
            "title": "Backend Engineer",
            "description": "Build APIs in Python",
            "category": "Engineering",
            "location": "Berlin",
            "salary_min": 50000,
            "salary_max": 70000,
            "status": status,
        }
        values.update(overrides)
        job = Job(**values)
        session.add(job)
        await session.commit()
        await session.refresh(job)
        return job

    return _make_job


@pytest.fixture
def notifications_for(session):
    """Load the notifications addressed to a user, oldest first."""

    async def _notifications_for(user_id: int) -> list[Notification]:
        result = await session.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    return _notifications_for
