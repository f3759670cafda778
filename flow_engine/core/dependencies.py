"""FastAPI dependency injection for the flow engine."""

from __future__ import annotations

from functools import lru_cache
from typing import AsyncGenerator

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings


# --- Database Session Dependency ---


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session."""
    from ..db import get_session

    async for session in get_session():
        yield session


# --- Repository Dependencies ---


def get_flow_repository(session: AsyncSession = Depends(get_db_session)):
    """Get flow repository instance."""
    from ..repositories import FlowRepository

    return FlowRepository(session)


def get_execution_repository(session: AsyncSession = Depends(get_db_session)):
    """Get execution repository instance."""
    from ..repositories import ExecutionRepository

    return ExecutionRepository(session)


# --- Collaborator Dependencies ---


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Get an HTTP client shared by the outbound collaborators of one request."""
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield client


def get_messaging_client(http_client: httpx.AsyncClient = Depends(get_http_client)):
    """Get the messaging client; without a gateway URL messages are only logged."""
    from ..collaborators import HttpMessagingClient, LoggingMessagingClient

    if settings.messaging_url:
        return HttpMessagingClient(
            settings.messaging_url,
            http_client,
            api_key=settings.messaging_api_key,
        )
    return LoggingMessagingClient()


def get_webhook_transport(http_client: httpx.AsyncClient = Depends(get_http_client)):
    """Get webhook transport instance."""
    from ..collaborators import HttpWebhookTransport

    return HttpWebhookTransport(http_client)


def get_entity_store(session: AsyncSession = Depends(get_db_session)):
    """Get entity store instance."""
    from ..collaborators import SqlEntityStore

    return SqlEntityStore(session)


@lru_cache
def get_handler_registry():
    """Get handler registry instance."""
    from ..engine.handler_registry import handler_registry, register_all_handlers

    register_all_handlers()
    return handler_registry


# --- Engine Dependencies ---


def get_flow_executor(
    flow_repo=Depends(get_flow_repository),
    execution_repo=Depends(get_execution_repository),
    entity_store=Depends(get_entity_store),
    messaging=Depends(get_messaging_client),
    webhook=Depends(get_webhook_transport),
    registry=Depends(get_handler_registry),
):
    """Get flow executor instance."""
    from ..engine.executor import FlowExecutor

    return FlowExecutor(
        flow_repo,
        execution_repo,
        entity_store,
        messaging,
        webhook,
        max_steps=settings.max_steps,
        strict_delivery=settings.strict_delivery,
        registry=registry,
    )


# --- Service Dependencies ---


def get_flow_service(flow_repo=Depends(get_flow_repository)):
    """Get flow service instance."""
    from ..services.flow_service import FlowService

    return FlowService(flow_repo)


def get_execution_service(
    executor=Depends(get_flow_executor),
    execution_repo=Depends(get_execution_repository),
    flow_repo=Depends(get_flow_repository),
):
    """Get execution service instance."""
    from ..services.execution_service import ExecutionService

    return ExecutionService(executor, execution_repo, flow_repo)


def get_node_service(handler_registry=Depends(get_handler_registry)):
    """Get node service instance."""
    from ..services.node_service import NodeService

    return NodeService(handler_registry)
