"""Trigger node - entry point of every flow."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import BaseHandler, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node


class TriggerHandler(BaseHandler):
    """Trigger node - confirms the run started. Performs no side effects."""

    node_description = NodeTypeDescription(
        name="trigger",
        display_name="Trigger",
        description="Starts the flow when an event fires for a customer",
        icon="fa:bolt",
        properties=[
            NodeProperty(
                display_name="Trigger Type",
                name="type",
                type="options",
                default="manual",
                options=[
                    NodePropertyOption(name="New Lead", value="new_lead"),
                    NodePropertyOption(name="Payment Failed", value="payment_failed"),
                    NodePropertyOption(name="Trial Expiring", value="trial_expiring"),
                    NodePropertyOption(name="Tag Added", value="tag_added"),
                    NodePropertyOption(name="Manual", value="manual"),
                ],
            ),
            NodeProperty(
                display_name="Tag Name",
                name="tagName",
                type="string",
                default="",
                display_options={"show": {"type": ["tag_added"]}},
            ),
            NodeProperty(
                display_name="Days Before Expiry",
                name="daysBeforeExpiry",
                type="number",
                default=3,
                display_options={"show": {"type": ["trial_expiring"]}},
            ),
        ],
    )

    @property
    def type(self) -> str:
        return "trigger"

    @property
    def description(self) -> str:
        return "Starts the flow when an event fires for a customer"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        return self.result(f"Trigger activated: {context.trigger_event}")
