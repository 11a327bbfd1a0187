"""
Application startup.

Tests:
- The configured admin is provisioned when the app starts
- Restarting does not create a second admin
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

import database.models  # noqa: F401  registers tables
from api import main
from core.config import settings
from database.engine import Base, get_db
from database.models.users import User, UserRole


@pytest.fixture
def empty_database(tmp_path, monkeypatch):
    """Point startup at an empty SQLite file; returns its sync URL."""
    path = tmp_path / "startup.db"
    sync_url = f"sqlite:///{path}"
    sync_engine = create_engine(sync_url)
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    async_engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    monkeypatch.setattr(main, "AsyncSessionLocal", factory)
    monkeypatch.setattr(main, "init_db", AsyncMock())
    monkeypatch.setattr(main, "close_db", AsyncMock())
    main.app.dependency_overrides[get_db] = override_get_db
    yield sync_url
    main.app.dependency_overrides.clear()


def _admins(sync_url):
    engine = create_engine(sync_url)
    with Session(engine) as session:
        admins = session.scalars(select(User).where(User.role == UserRole.ADMIN)).all()
        rows = [(u.email, u.first_name) for u in admins]
    engine.dispose()
    return rows


class TestAdminProvisioning:

    def test_admin_created_on_startup(self, empty_database, monkeypatch):
        monkeypatch.setattr(settings, "admin_email", "Ops@JobSphere.com")
        monkeypatch.setattr(settings, "admin_password", "Bootstrap1!")

        for _ in range(2):
            with TestClient(main.app):
                pass

        assert _admins(empty_database) == [("ops@jobsphere.com", "Admin")]

        with TestClient(main.app) as client:
            response = client.post(
                "/api/v1/auth/login",
                json={"email": "ops@jobsphere.com", "password": "Bootstrap1!"},
            )
        assert response.status_code == 200, response.text
        assert response.json()["user"]["role"] == "admin"

    def test_no_admin_without_credentials(self, empty_database, monkeypatch):
        monkeypatch.setattr(settings, "admin_email", None)
        monkeypatch.setattr(settings, "admin_password", None)

        with TestClient(main.app):
            pass

        assert _admins(empty_database) == []
