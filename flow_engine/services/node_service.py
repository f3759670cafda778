"""Node type catalog service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..engine.handler_registry import HandlerRegistry


class NodeService:
    """Service for node type descriptions."""

    def __init__(self, handler_registry: HandlerRegistry) -> None:
        self._handler_registry = handler_registry

    def list_node_types(self) -> list[dict[str, Any]]:
        """List all node types with their config schemas."""
        return self._handler_registry.get_catalog()
