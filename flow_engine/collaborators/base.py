"""Interfaces for the external systems node handlers talk to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot


@dataclass
class DeliveryReceipt:
    """Acknowledgement from a messaging provider."""

    channel: str
    contact_ref: str
    provider_message_id: str | None = None


@dataclass
class WebhookResponse:
    """Minimal view of an outbound webhook response."""

    status_code: int
    text: str = ""


class MessagingClient(ABC):
    """Sends a rendered message over SMS, WhatsApp or email.

    Implementations raise ``NetworkError`` when the provider cannot be reached
    or rejects the request.
    """

    @abstractmethod
    async def send(self, channel: str, contact_ref: str, text: str) -> DeliveryReceipt:
        ...


class WebhookTransport(ABC):
    """Performs outbound HTTP calls for webhook nodes.

    Implementations raise ``NetworkError`` on transport failure. Non-2xx
    responses are returned, not raised.
    """

    @abstractmethod
    async def fetch(self, method: str, url: str, body: str | None = None) -> WebhookResponse:
        ...


class EntityStore(ABC):
    """Durable store of target entities (customer records)."""

    @abstractmethod
    async def read_snapshot(self, entity_id: str) -> EntitySnapshot | None:
        """Return the entity's current fields and tags, or None if unknown."""
        ...

    @abstractmethod
    async def add_tag(self, entity_id: str, tag: str) -> frozenset[str]:
        """Union ``tag`` into the stored tag set and return the new set."""
        ...

    @abstractmethod
    async def remove_tag(self, entity_id: str, tag: str) -> frozenset[str]:
        """Remove ``tag`` from the stored tag set and return the new set."""
        ...
