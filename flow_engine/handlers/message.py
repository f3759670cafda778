"""Message node - sends a templated SMS, WhatsApp or email message."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.exceptions import ChannelUnavailable, NetworkError
from ..engine.templating import render_template
from .base import BaseHandler, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node

logger = logging.getLogger(__name__)

# Snapshot fields tried in order when resolving a channel's contact reference
CHANNEL_CONTACT_FIELDS: dict[str, tuple[str, ...]] = {
    "whatsapp": ("phone_e164", "phone"),
    "sms": ("phone_e164", "phone"),
    "email": ("email",),
}


def resolve_contact(channel: str, snapshot: EntitySnapshot) -> str:
    """Return the contact reference for ``channel`` or raise ChannelUnavailable."""
    for field_name in CHANNEL_CONTACT_FIELDS.get(channel, ()):
        value = snapshot.get(field_name)
        if value:
            return str(value)
    raise ChannelUnavailable(channel, snapshot.entity_id)


class MessageHandler(BaseHandler):
    """Message node - renders the template and hands it to the messaging provider."""

    node_description = NodeTypeDescription(
        name="message",
        display_name="Send Message",
        description="Send a WhatsApp, SMS or email message to the customer",
        icon="fa:comment",
        properties=[
            NodeProperty(
                display_name="Channel",
                name="channel",
                type="options",
                default="whatsapp",
                options=[
                    NodePropertyOption(name="WhatsApp", value="whatsapp"),
                    NodePropertyOption(name="SMS", value="sms"),
                    NodePropertyOption(name="Email", value="email"),
                ],
            ),
            NodeProperty(
                display_name="Message",
                name="customMessage",
                type="string",
                default="",
                placeholder="Hi {{name}}, your payment of {{amount}} failed.",
                description="Supports {{name}}, {{email}}, {{phone}} and {{amount}}",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return "message"

    @property
    def description(self) -> str:
        return "Send a WhatsApp, SMS or email message to the customer"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        channel = self.get_config(node, "channel", "whatsapp")
        if channel not in CHANNEL_CONTACT_FIELDS:
            raise ValueError(f"Unsupported message channel: {channel}")

        template = self.get_config(node, "customMessage") or self.get_config(node, "template", "")
        text = render_template(template, snapshot)

        try:
            contact_ref = resolve_contact(channel, snapshot)
        except ChannelUnavailable as e:
            logger.warning("%s (node %s)", e.message, node.id)
            return self.result(f"Channel unavailable: no {channel} contact, message not sent")

        try:
            await context.messaging.send(channel, contact_ref, text)
        except NetworkError as e:
            if context.strict_delivery:
                raise
            logger.warning("Message delivery failed for node %s: %s", node.id, e.message)
            return self.result(f"Warning: {channel} message not delivered: {e.message}")

        return self.result(f"Sent {channel} message")
