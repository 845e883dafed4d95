"""Fixtures for API tests.

The application runs against a fresh in-memory database per test through
httpx's ASGI transport. ``make_user`` registers and logs in users through
the API and returns their id plus ready-to-use auth headers.
"""

import sys
from dataclasses import dataclass
from typing import AsyncGenerator, Awaitable, Callable, Dict

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.core.database.utils import create_all, create_engine, create_sessionmaker


@dataclass
class AuthedUser:
    id: int
    email: str
    password: str
    headers: Dict[str, str]


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory database with all tables."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with overridden dependencies."""
    from scriptorium.core.database import get_session
    from scriptorium.execution.runner import CodeRunner, get_code_runner
    from scriptorium.server.core.config import ExecutionConfig
    from scriptorium.server.main import app

    runner = CodeRunner(ExecutionConfig(python_command=sys.executable, timeout_seconds=10.0, work_dir=str(tmp_path)))

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_code_runner] = lambda: runner

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_user(client: AsyncClient, session: AsyncSession) -> Callable[..., Awaitable[AuthedUser]]:
    """Factory registering a user, optionally promoting them to admin, and logging in."""
    from scriptorium.core.database.repositories import UserRepository

    async def _make(email: str = "ada@example.com", password: str = "secret123", admin: bool = False) -> AuthedUser:
        response = await client.post(
            "/api/v1/auth/register",
            json={"firstname": "Ada", "lastname": "Lovelace", "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["id"]

        if admin:
            repo = UserRepository(session)
            user = await repo.get_by_id(user_id)
            user.role = "ADMIN"
            await repo.update(user)

        login = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        client.cookies.clear()
        token = login.json()["access_token"]
        return AuthedUser(id=user_id, email=email, password=password, headers={"Authorization": f"Bearer {token}"})

    return _make
