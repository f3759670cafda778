"""Engine and session wiring for the flow store (flows, executions, contacts)."""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from ..core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./flows.db"


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the flow store.

    SQLite connections are shared across the event loop's tasks; an
    in-memory database must also live on a single pooled connection or each
    checkout would see an empty schema.
    """
    options: dict = {"echo": echo, "future": True}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
    return create_async_engine(url, **options)


engine = build_engine(settings.database_url or DEFAULT_DATABASE_URL, echo=settings.debug)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create the flow, execution, log and contact tables if missing."""
    from . import models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.debug("Flow store ready: %s", ", ".join(sorted(SQLModel.metadata.tables)))


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session bound to the flow store."""
    async with async_session_factory() as session:
        yield session


async def close_db(bind: AsyncEngine | None = None) -> None:
    """Dispose of pooled connections."""
    await (bind or engine).dispose()
