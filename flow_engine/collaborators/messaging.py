"""Messaging provider adapters."""

from __future__ import annotations

import logging

import httpx

from ..core.exceptions import NetworkError
from .base import DeliveryReceipt, MessagingClient

logger = logging.getLogger(__name__)


class HttpMessagingClient(MessagingClient):
    """Posts outbound messages to an HTTP messaging gateway.

    The gateway receives ``{"channel", "to", "text"}`` and is expected to
    answer with JSON containing an optional ``id``.
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient,
        api_key: str | None = None,
    ) -> None:
        self._base_url = base_url
        self._client = http_client
        self._api_key = api_key

    async def send(self, channel: str, contact_ref: str, text: str) -> DeliveryReceipt:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = await self._client.post(
                self._base_url,
                headers=headers,
                json={"channel": channel, "to": contact_ref, "text": text},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NetworkError(f"Message delivery failed: {e}", target=self._base_url) from e

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None

        logger.info("Sent %s message to %s", channel, contact_ref)
        return DeliveryReceipt(
            channel=channel,
            contact_ref=contact_ref,
            provider_message_id=message_id,
        )


class LoggingMessagingClient(MessagingClient):
    """Stand-in used when no messaging gateway is configured."""

    async def send(self, channel: str, contact_ref: str, text: str) -> DeliveryReceipt:
        logger.info("No messaging gateway configured; %s message to %s: %s", channel, contact_ref, text)
        return DeliveryReceipt(channel=channel, contact_ref=contact_ref)
