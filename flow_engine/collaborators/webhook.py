"""Outbound webhook transport."""

from __future__ import annotations

import logging

import httpx

from ..core.exceptions import NetworkError
from .base import WebhookResponse, WebhookTransport

logger = logging.getLogger(__name__)


class HttpWebhookTransport(WebhookTransport):
    """Sends webhook requests through a shared ``httpx.AsyncClient``."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def fetch(self, method: str, url: str, body: str | None = None) -> WebhookResponse:
        method = method.upper()
        content = body if body and method != "GET" else None

        try:
            response = await self._client.request(
                method=method,
                url=url,
                headers={"Content-Type": "application/json"},
                content=content,
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"{type(e).__name__}: {e}", target=url) from e

        logger.info("Webhook %s %s -> %s", method, url, response.status_code)
        return WebhookResponse(status_code=response.status_code, text=response.text)
