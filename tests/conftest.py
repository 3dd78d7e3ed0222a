import os
from datetime import date
from typing import AsyncGenerator
from uuid import UUID

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./heartline_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.realtime import get_notifier
from app.database import Base, get_db
from app.main import app
from app.models.user import User


class RecordingNotifier:
    """Collects pushed events instead of writing to sockets."""

    def __init__(self) -> None:
        self.events: list[tuple[UUID, dict]] = []

    async def notify(self, user_id: UUID, payload: dict) -> None:
        self.events.append((user_id, payload))

    def types_for(self, user_id: UUID) -> list[str]:
        return [
            payload["notification"]["type"]
            for recipient, payload in self.events
            if recipient == user_id
        ]


@pytest.fixture
def test_database_url(tmp_path) -> str:
    return os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture(scope="function")
async def db_session(test_database_url: str) -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(test_database_url, echo=False, poolclass=NullPool)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_maker() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession, notifier: RecordingNotifier
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> dict:
    user_data = {
        "email": "test@example.com",
        "password": "testpassword123",
        "phone": "+2348012345678",
    }
    response = await client.post("/api/v1/auth/register", json=user_data)
    return {**user_data, "response": response.json()}


@pytest_asyncio.fixture
async def auth_token(client: AsyncClient, registered_user: dict) -> str:
    response = await client.post(
        "/api/v1/auth/login",
        data={
            "username": registered_user["email"],
            "password": registered_user["password"],
        },
    )
    return response.json()["access_token"]


def profile_payload(gender: str = "male", **overrides) -> dict:
    payload = {
        "first_name": "Ada" if gender == "female" else "Tunde",
        "last_name": "Okafor",
        "date_of_birth": date(1995, 6, 15).isoformat(),
        "gender": gender,
        "city": "Ikeja",
        "state": "Lagos",
        "country": "Nigeria",
        "religion": "Christian",
        "education": "Bachelors",
        "genotype": "AA",
        "blood_group": "O+",
        "body_type": "Athletic",
        "drinking_status": "Socially",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def profile_factory():
    return profile_payload


@pytest.fixture
def user_factory(client: AsyncClient, db_session: AsyncSession):
    """
    Register a user, log in and optionally create a profile.

    Users get a verified email unless ``email_verified=False`` is passed.

    Returns a dict with ``id``, ``email`` and ready-to-use ``headers``.
    """
    counter = {"n": 0}

    async def create(
        gender: str | None = "male", email_verified: bool = True, **profile_overrides
    ) -> dict:
        counter["n"] += 1
        email = f"user{counter['n']}@example.com"
        password = "testpassword123"

        register = await client.post(
            "/api/v1/auth/register", json={"email": email, "password": password}
        )
        assert register.status_code == 201, register.text
        if email_verified:
            await db_session.execute(
                update(User)
                .where(User.id == UUID(register.json()["id"]))
                .values(email_verified=True)
            )
            await db_session.commit()

        login = await client.post(
            "/api/v1/auth/login", data={"username": email, "password": password}
        )
        headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

        if gender is not None:
            profile = await client.post(
                "/api/v1/profiles/",
                json=profile_payload(gender, **profile_overrides),
                headers=headers,
            )
            assert profile.status_code == 201, profile.text

        return {"id": register.json()["id"], "email": email, "headers": headers}

    return create


@pytest.fixture
def make_admin(db_session: AsyncSession):
    async def promote(user: dict) -> dict:
        await db_session.execute(
            update(User).where(User.id == UUID(user["id"])).values(is_admin=True)
        )
        await db_session.commit()
        return user

    return promote


def pytest_collection_modifyitems(config, items):
    if os.environ.get("TEST_DATABASE_URL", "").startswith("postgresql"):
        return
    skip_postgres = pytest.mark.skip(reason="needs TEST_DATABASE_URL pointing at PostgreSQL")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip_postgres)
