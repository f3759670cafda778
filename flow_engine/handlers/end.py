"""End node - terminates the flow."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import BaseHandler, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node


class EndHandler(BaseHandler):
    """End node - always completes the run."""

    node_description = NodeTypeDescription(
        name="end",
        display_name="End",
        description="Finish the flow",
        icon="fa:stop",
        outputs=[],
    )

    @property
    def type(self) -> str:
        return "end"

    @property
    def description(self) -> str:
        return "Finish the flow"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        return self.result("Flow ended")
