import os
import tempfile
from datetime import date
from typing import AsyncGenerator, Dict, Generator, List

_TEST_DIR = tempfile.mkdtemp(prefix="parlour-tests-")
TEST_DB_PATH = os.path.join(_TEST_DIR, "test.db")

# Settings are read at import time, so the environment is prepared before importing parlour
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from parlour.auth.models import User
from parlour.auth.security import create_access_token, hash_password
from parlour.core.enums import UserRole
from parlour.core.models import Employee
from parlour.db.session import Base, get_db
from parlour.main import create_app

TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
TEST_PASSWORD = "StrongPass123"


class FakeConnection:
    """Stand-in for a websocket: records what the broadcaster sends."""

    def __init__(self, fail: bool = False) -> None:
        self.messages: List[dict] = []
        self.fail = fail

    async def send_json(self, data) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.messages.append(data)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(
        subject={"sub": str(user.id), "role": user.role, "email": user.email}
    )
    return {"Authorization": f"Bearer {token}"}


def insert_user(engine: Engine, email: str, name: str, role: UserRole) -> User:
    with Session(engine, expire_on_commit=False) as session:
        user = User(
            email=email,
            name=name,
            password_hash=hash_password(TEST_PASSWORD),
            role=role.value,
        )
        session.add(user)
        session.commit()
        return user


def insert_employee(
    engine: Engine,
    name: str,
    email: str,
    position: str = "Hair Stylist",
    department: str = "Hair Care",
    is_active: bool = True,
) -> Employee:
    with Session(engine, expire_on_commit=False) as session:
        employee = Employee(
            name=name,
            email=email,
            phone="+1234567890",
            position=position,
            department=department,
            join_date=date(2023, 1, 15),
            is_active=is_active,
        )
        session.add(employee)
        session.commit()
        return employee


@pytest.fixture()
def fake_connection():
    return FakeConnection


@pytest.fixture()
def sync_engine() -> Generator[Engine, None, None]:
    """Fresh schema in the test database file for every test."""
    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(sync_engine: Engine) -> async_sessionmaker:
    # NullPool: every session gets its own connection, whichever event loop it runs on
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def app(session_factory: async_sessionmaker):
    """App with get_db overridden; each request gets its own session like in production."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture()
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def super_admin(sync_engine: Engine) -> User:
    return insert_user(sync_engine, "superadmin@parlour.com", "Super Administrator", UserRole.SUPER_ADMIN)


@pytest.fixture()
def admin(sync_engine: Engine) -> User:
    return insert_user(sync_engine, "admin@parlour.com", "Administrator", UserRole.ADMIN)


@pytest.fixture()
def super_admin_headers(super_admin: User) -> Dict[str, str]:
    return auth_headers(super_admin)


@pytest.fixture()
def admin_headers(admin: User) -> Dict[str, str]:
    return auth_headers(admin)


@pytest.fixture()
def employee(sync_engine: Engine) -> Employee:
    return insert_employee(sync_engine, "Alice Johnson", "alice@parlour.com")


@pytest.fixture()
def other_employee(sync_engine: Engine) -> Employee:
    return insert_employee(
        sync_engine,
        "Bob Smith",
        "bob@parlour.com",
        position="Nail Technician",
        department="Nail Care",
    )


@pytest.fixture()
def inactive_employee(sync_engine: Engine) -> Employee:
    return insert_employee(sync_engine, "Eve Former", "eve@parlour.com", is_active=False)
