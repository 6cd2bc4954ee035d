import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Database
from app.main import create_app
from app.services import identity_service, user_profile_service

PASSWORD = "password123"


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", create_tables=True)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    session_maker = await database.connect()
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(database)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def set_profile_fields(database: Database, uid: str, **fields) -> None:
    """Write role/status straight to the stores, as a superadmin bootstrap would."""
    session_maker = await database.connect()
    async with session_maker() as session:
        profile = await user_profile_service.get_profile_by_uid(session, uid)
        for key, value in fields.items():
            setattr(profile, key, value)
        await identity_service.set_custom_claims(session, uid, fields, commit=False)
        await session.commit()


async def login(client: AsyncClient, email: str) -> str:
    response = await client.post(
        "/api/auth/login",
        data={"username": email, "password": PASSWORD},
    )
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


async def create_member(
    client: AsyncClient,
    database: Database,
    email: str,
    role: str = "user",
    status: str = "approved",
    fb_name: str | None = None,
) -> tuple[str, str]:
    """Helper to sign up, register a profile, set role/status and log in. Returns (token, uid)."""
    signup = await client.post(
        "/api/auth/signup",
        json={"email": email, "password": PASSWORD, "fbName": fb_name},
    )
    assert signup.status_code == 201, signup.text
    uid = signup.json()["uid"]

    register = await client.post(
        "/api/users",
        json={"uid": uid, "email": email, "fbName": fb_name or email.split("@")[0]},
    )
    assert register.status_code == 201, register.text

    fields = {}
    if role != "user":
        fields["role"] = role
    if status != "pending":
        fields["status"] = status
    if fields:
        await set_profile_fields(database, uid, **fields)

    token = await login(client, email)
    return token, uid


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def report_payload(**overrides) -> dict:
    payload = {
        "name": "A",
        "facebookLink": "http://x.com/a",
        "phone": "+1 555-1234",
        "status": "banned",
        "reason": "r",
        "reporterId": "u1",
        "reporterName": "B",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def admin_token(client: AsyncClient, database: Database) -> str:
    token, _ = await create_member(client, database, "admin@example.com", role="admin")
    return token


@pytest_asyncio.fixture
async def superadmin(client: AsyncClient, database: Database) -> tuple[str, str]:
    return await create_member(client, database, "root@example.com", role="superadmin")
