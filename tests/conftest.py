"""Shared fixtures: an in-memory database, fake collaborators and an executor."""

from __future__ import annotations

from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from flow_engine.collaborators import (
    DeliveryReceipt,
    MessagingClient,
    SqlEntityStore,
    WebhookResponse,
    WebhookTransport,
)
from flow_engine.core.exceptions import NetworkError
from flow_engine.db.models import ContactModel
from flow_engine.db.session import build_engine, close_db, init_db
from flow_engine.engine.executor import FlowExecutor
from flow_engine.engine.types import Flow
from flow_engine.repositories import ExecutionRepository, FlowRepository

# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeMessaging(MessagingClient):
    """Records every send; raises NetworkError when ``fail`` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, channel: str, contact_ref: str, text: str) -> DeliveryReceipt:
        if self.fail:
            raise NetworkError("provider unreachable", target="fake")
        self.sent.append((channel, contact_ref, text))
        return DeliveryReceipt(channel=channel, contact_ref=contact_ref, provider_message_id="m-1")


class FakeWebhook(WebhookTransport):
    """Records every call; raises NetworkError when ``fail`` is set."""

    def __init__(self, fail: bool = False, status_code: int = 200):
        self.fail = fail
        self.status_code = status_code
        self.calls: list[tuple[str, str, str | None]] = []

    async def fetch(self, method: str, url: str, body: str | None = None) -> WebhookResponse:
        self.calls.append((method, url, body))
        if self.fail:
            raise NetworkError("connection refused", target=url)
        return WebhookResponse(status_code=self.status_code, text="ok")


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine():
    engine = build_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def flow_repo(session):
    return FlowRepository(session)


@pytest.fixture
def execution_repo(session):
    return ExecutionRepository(session)


@pytest.fixture
def entity_store(session):
    return SqlEntityStore(session)


@pytest.fixture
def messaging():
    return FakeMessaging()


@pytest.fixture
def webhook():
    return FakeWebhook()


@pytest.fixture
def executor(flow_repo, execution_repo, entity_store, messaging, webhook):
    return FlowExecutor(
        flow_repo,
        execution_repo,
        entity_store,
        messaging,
        webhook,
        max_steps=50,
        strict_delivery=False,
    )


@pytest.fixture
def store_flow(flow_repo):
    """Persist a flow as-is, bypassing activation checks."""

    async def _store(flow: Flow) -> Flow:
        return await flow_repo.create(flow)

    return _store


@pytest.fixture
def add_contact(session):
    async def _add(contact_id: str, **fields: Any) -> ContactModel:
        fields.setdefault("tags", [])
        contact = ContactModel(id=contact_id, **fields)
        session.add(contact)
        await session.commit()
        return contact

    return _add
