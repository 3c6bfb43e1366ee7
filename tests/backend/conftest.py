import os
import uuid

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["ENV"] = "development"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from blog.core import db as db_module
from blog.main import app
from blog.models.user import User
from blog.services import accounts

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class RecordingPresence:
    """Presence notifier that remembers every published event."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    async def publish(self, event: str, payload: dict) -> None:
        self.events.append((event, payload))


class FailingPresence:
    """Presence notifier whose transport is down."""

    def __init__(self):
        self.calls = 0

    async def publish(self, event: str, payload: dict) -> None:
        self.calls += 1
        raise RuntimeError("presence transport down")


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """Fresh database for service-level tests."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def presence():
    """
    Replace the application's presence channel with a recorder for the test.
    """
    original = app.state.presence
    recorder = RecordingPresence()
    app.state.presence = recorder
    yield recorder
    app.state.presence = original


@pytest.fixture
def failing_presence():
    """
    Install a presence notifier that always raises.
    """
    original = app.state.presence
    failing = FailingPresence()
    app.state.presence = failing
    yield failing
    app.state.presence = original


@pytest_asyncio.fixture
async def client(db, presence):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create regular accounts directly through the account store.
    """

    async def _create_user(password: str = "UserPass!23", **kwargs) -> tuple[User, str]:
        tag = uuid.uuid4().hex[:6]
        user = await accounts.create_account(
            full_name=kwargs.pop("full_name", f"User {tag}"),
            email=kwargs.pop("email", f"user_{tag}@example.com"),
            password=password,
            **kwargs,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_admin(create_user):
    """
    Factory fixture to create admin accounts for privileged endpoints.
    """

    async def _create_admin(password: str = "AdminPass!23") -> tuple[User, str]:
        return await create_user(password=password, roles=["USER", "ADMIN"])

    return _create_admin


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/users/login",
            json={"email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
