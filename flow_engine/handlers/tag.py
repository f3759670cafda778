"""Tag node - adds or removes a tag on the customer record."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import BaseHandler, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node


class TagHandler(BaseHandler):
    """Tag node - writes straight to the entity store, not to the snapshot."""

    node_description = NodeTypeDescription(
        name="tag",
        display_name="Tag",
        description="Add or remove a tag on the customer",
        icon="fa:tag",
        properties=[
            NodeProperty(
                display_name="Action",
                name="action",
                type="options",
                default="add",
                options=[
                    NodePropertyOption(name="Add Tag", value="add"),
                    NodePropertyOption(name="Remove Tag", value="remove"),
                ],
            ),
            NodeProperty(
                display_name="Tag Name",
                name="tagName",
                type="string",
                default="",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return "tag"

    @property
    def description(self) -> str:
        return "Add or remove a tag on the customer"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        action = self.get_config(node, "action", "add")
        tag_name = self.get_config(node, "tagName", "")

        if action not in ("add", "remove"):
            raise ValueError(f"Unsupported tag action: {action}")

        if not tag_name:
            return self.result(f"Tag {action}: no tag configured, nothing changed")

        if action == "add":
            await context.entity_store.add_tag(context.entity_id, tag_name)
        else:
            await context.entity_store.remove_tag(context.entity_id, tag_name)

        return self.result(f"Tag {action}: {tag_name}")
