"""Handler registry mapping node types to their handlers."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .types import NodeType

if TYPE_CHECKING:
    from ..handlers.base import BaseHandler, NodeProperty


class HandlerRegistry:
    """Registry of node handlers keyed by node type."""

    def __init__(self) -> None:
        self._handlers: dict[str, BaseHandler] = {}

    def get(self, node_type: str) -> BaseHandler:
        """
        Get the handler instance for a node type.

        Handlers are stateless, so one cached instance serves every run.

        Raises:
            ValueError: If node type is not registered
        """
        key = node_type.value if isinstance(node_type, NodeType) else node_type
        if key not in self._handlers:
            raise ValueError(f'Unknown node type: "{key}"')
        return self._handlers[key]

    def has(self, node_type: str) -> bool:
        """Check if node type is registered."""
        key = node_type.value if isinstance(node_type, NodeType) else node_type
        return key in self._handlers

    def list(self) -> list[str]:
        """List all registered node types."""
        return list(self._handlers.keys())

    def register(self, handler_class: type[BaseHandler]) -> None:
        """Register a handler class if its type is not already registered."""
        instance = handler_class()
        if instance.type not in self._handlers:
            self._handlers[instance.type] = instance

    def missing_types(self) -> list[str]:
        """Node types that have no registered handler."""
        return [t.value for t in NodeType if t.value not in self._handlers]

    def ensure_complete(self) -> None:
        """Fail fast unless every node type has a handler."""
        missing = self.missing_types()
        if missing:
            raise RuntimeError(f"No handler registered for node types: {', '.join(missing)}")

    def get_catalog(self) -> list[dict[str, Any]]:
        """
        Describe every node type and its config fields.

        This is what the flow editor uses to build node configuration forms.
        """
        catalog = []
        for handler in self._handlers.values():
            desc = handler.node_description
            catalog.append(
                {
                    "type": handler.type,
                    "displayName": desc.display_name if desc else handler.type,
                    "description": handler.description,
                    "icon": desc.icon if desc else None,
                    "outputs": desc.outputs if desc else ["main"],
                    "properties": self._convert_properties(desc.properties) if desc else [],
                }
            )
        return catalog

    def _convert_properties(self, properties: list[NodeProperty]) -> list[dict[str, Any]]:
        result = []
        for prop in properties:
            prop_dict: dict[str, Any] = {
                "displayName": prop.display_name,
                "name": prop.name,
                "type": prop.type,
                "default": prop.default,
            }
            if prop.required:
                prop_dict["required"] = True
            if prop.description:
                prop_dict["description"] = prop.description
            if prop.placeholder:
                prop_dict["placeholder"] = prop.placeholder
            if prop.options:
                prop_dict["options"] = [
                    {"name": o.name, "value": o.value, "description": o.description}
                    for o in prop.options
                ]
            if prop.display_options:
                prop_dict["displayOptions"] = prop.display_options
            result.append(prop_dict)
        return result


# Singleton instance
handler_registry = HandlerRegistry()


def register_all_handlers() -> None:
    """Register all built-in handlers. Safe to call more than once."""
    from ..handlers import (
        TriggerHandler,
        MessageHandler,
        DelayHandler,
        ConditionHandler,
        TagHandler,
        WebhookHandler,
        EndHandler,
    )

    all_handler_classes: list[type[BaseHandler]] = [
        TriggerHandler,
        MessageHandler,
        DelayHandler,
        ConditionHandler,
        TagHandler,
        WebhookHandler,
        EndHandler,
    ]

    for handler_class in all_handler_classes:
        handler_registry.register(handler_class)

    handler_registry.ensure_complete()
