"""Fixtures for tests that drive the HTTP API end to end."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

import database.models  # noqa: F401  registers tables
from api.dependencies import get_file_storage
from api.main import app
from core.security import hash_password
from core.storage.local import LocalStorage
from database.engine import Base, get_db
from database.models.users import User, UserRole

ADMIN_EMAIL = "admin@jobsphere.com"
ADMIN_PASSWORD = "AdminPass1!"


@pytest.fixture
def database_file(tmp_path):
    """SQLite file with the full schema and one provisioned admin."""
    path = tmp_path / "api.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        session.add(
            User(
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                first_name="Ada",
                last_name="Admin",
                phone="+1 555 010 0000",
                role=UserRole.ADMIN,
                is_enabled=True,
            )
        )
        session.commit()
    sync_engine.dispose()
    return path


@pytest.fixture
def client(database_file, tmp_path):
    """Test client whose database and uploads live under ``tmp_path``."""
    async_engine = create_async_engine(
        f"sqlite+aiosqlite:///{database_file}", poolclass=NullPool
    )
    factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    storage = LocalStorage(base_path=str(tmp_path / "uploads"))

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Log in and return bearer headers."""

    def _login(email: str, password: str) -> dict:
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
def admin_headers(login):
    return login(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def register(client):
    """Register an account and return bearer headers."""

    def _register(email: str, role: str, first_name: str = "Test", last_name: str = "User") -> dict:
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": email,
                "password": "Passw0rd!",
                "first_name": first_name,
                "last_name": last_name,
                "role": role,
                "phone": "+1 555 123 4567",
            },
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register
