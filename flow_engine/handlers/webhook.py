"""Webhook node - calls an external HTTP endpoint."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from ..core.exceptions import NetworkError
from ..engine.templating import render_template
from .base import BaseHandler, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node

logger = logging.getLogger(__name__)


class WebhookHandler(BaseHandler):
    """Webhook node - transport failures are logged and the run continues."""

    node_description = NodeTypeDescription(
        name="webhook",
        display_name="Webhook",
        description="Send an HTTP request to an external system",
        icon="fa:globe",
        properties=[
            NodeProperty(
                display_name="Method",
                name="method",
                type="options",
                default="POST",
                options=[
                    NodePropertyOption(name="GET", value="GET"),
                    NodePropertyOption(name="POST", value="POST"),
                ],
            ),
            NodeProperty(
                display_name="URL",
                name="url",
                type="string",
                default="",
                placeholder="https://example.com/hooks/{{client_id}}",
            ),
            NodeProperty(
                display_name="Body (JSON)",
                name="body",
                type="json",
                default="",
                placeholder='{"client_id": "{{client_id}}", "email": "{{email}}"}',
            ),
        ],
    )

    @property
    def type(self) -> str:
        return "webhook"

    @property
    def description(self) -> str:
        return "Send an HTTP request to an external system"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        url = render_template(self.get_config(node, "url", ""), snapshot)
        method = str(self.get_config(node, "method", "POST")).upper()
        body = self.get_config(node, "body", "")
        if not isinstance(body, str):
            # JSON editors may hand over the parsed object
            body = json.dumps(body)
        body = render_template(body, snapshot)

        if not url:
            return self.result("Webhook: No URL configured")

        try:
            response = await context.webhook.fetch(method, url, body or None)
        except NetworkError as e:
            if context.strict_delivery:
                raise
            logger.warning("Webhook %s %s failed for node %s: %s", method, url, node.id, e.message)
            return self.result(f"Webhook failed: {e.message}")

        return self.result(f"Webhook {method} {url}: {response.status_code}")
