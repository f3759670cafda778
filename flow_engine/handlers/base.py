"""Base handler class for all flow node types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node


@dataclass
class NodePropertyOption:
    """Option for a node property."""

    name: str
    value: str
    description: str | None = None


@dataclass
class NodeProperty:
    """Config field definition for the editor form."""

    display_name: str
    name: str
    type: str  # string, number, options, json
    default: Any = None
    required: bool = False
    description: str | None = None
    placeholder: str | None = None
    options: list[NodePropertyOption] | None = None
    display_options: dict[str, Any] | None = None


@dataclass
class NodeTypeDescription:
    """Description of a node type for the editor's node catalog."""

    name: str
    display_name: str
    description: str
    icon: str | None = None
    outputs: list[str] = field(default_factory=lambda: ["main"])
    properties: list[NodeProperty] = field(default_factory=list)


class BaseHandler(ABC):
    """
    Abstract base class for node handlers.

    A handler computes the outcome of one node against the entity snapshot.
    It holds no state; all I/O goes through the collaborators on the
    ``HandlerContext``. Raising marks the execution failed.
    """

    node_description: NodeTypeDescription | None = None

    @property
    @abstractmethod
    def type(self) -> str:
        """Node type identifier."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Short description of what the node does."""
        ...

    @abstractmethod
    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        """Run the node logic."""
        ...

    def get_config(self, node: Node, key: str, default: Any = None) -> Any:
        """Get a config value from the node, enforcing required fields."""
        value = node.config.get(key)
        if value is None or value == "":
            if default is None and self._is_required_config(key):
                raise ValueError(f'Missing required config "{key}" in node "{node.id}"')
            return default
        return value

    def _is_required_config(self, key: str) -> bool:
        if not self.node_description:
            return False
        for prop in self.node_description.properties:
            if prop.name == key:
                return prop.required
        return False

    def result(
        self,
        message: str,
        condition_result: bool | None = None,
        delay_ms: int | None = None,
    ) -> HandlerResult:
        """Helper to build a handler result."""
        from ..engine.types import HandlerResult

        return HandlerResult(
            message=message,
            condition_result=condition_result,
            delay_ms=delay_ms,
        )
