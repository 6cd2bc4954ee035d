import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy import inspect

from app.database import Database


@pytest.mark.asyncio
async def test_connect_is_single_flight(tmp_path, monkeypatch):
    import app.database as database_module

    created = []
    real_create = database_module.create_async_engine

    def counting_create(*args, **kwargs):
        engine = real_create(*args, **kwargs)
        created.append(engine)
        return engine

    monkeypatch.setattr(database_module, "create_async_engine", counting_create)
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'single.db'}", create_tables=True)

    makers = await asyncio.gather(*(db.connect() for _ in range(10)))

    assert len(created) == 1
    assert all(maker is makers[0] for maker in makers)
    await db.dispose()


@pytest.mark.asyncio
async def test_connect_creates_tables(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'tables.db'}", create_tables=True)
    await db.connect()

    async with db.engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {"reports", "user_profiles", "identity_accounts"} <= set(tables)
    await db.dispose()


@pytest.mark.asyncio
async def test_dispose_allows_reconnect(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'again.db'}")
    first = await db.connect()
    await db.dispose()

    assert db.engine is None
    second = await db.connect()

    assert second is not first
    assert await db.ping() is True
    await db.dispose()


@pytest.mark.asyncio
async def test_ping_reports_unreachable_database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'x.db'}")

    assert await db.ping() is False


@pytest.mark.asyncio
async def test_health_endpoint(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert "running" in response.json()["message"]
