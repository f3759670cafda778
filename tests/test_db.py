"""Tests for flow store engine wiring."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from flow_engine.db.session import build_engine, close_db, init_db


def test_in_memory_sqlite_shares_one_connection():
    engine = build_engine("sqlite+aiosqlite://")
    assert isinstance(engine.sync_engine.pool, StaticPool)


def test_file_sqlite_uses_a_regular_pool(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'flows.db'}")
    assert not isinstance(engine.sync_engine.pool, StaticPool)


@pytest.mark.asyncio
async def test_init_db_creates_flow_store_tables():
    engine = build_engine("sqlite+aiosqlite://")
    await init_db(engine)

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))

    await close_db(engine)
    assert tables == {"automation_flows", "flow_executions", "execution_log_entries", "contacts"}
