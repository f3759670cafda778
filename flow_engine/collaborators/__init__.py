"""Adapters for messaging, webhook and entity-store collaborators."""

from .base import (
    DeliveryReceipt,
    EntityStore,
    MessagingClient,
    WebhookResponse,
    WebhookTransport,
)
from .entity_store import SqlEntityStore
from .messaging import HttpMessagingClient, LoggingMessagingClient
from .webhook import HttpWebhookTransport

__all__ = [
    "DeliveryReceipt",
    "EntityStore",
    "MessagingClient",
    "WebhookResponse",
    "WebhookTransport",
    "SqlEntityStore",
    "HttpMessagingClient",
    "LoggingMessagingClient",
    "HttpWebhookTransport",
]
