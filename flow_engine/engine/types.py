"""Core type definitions for the flow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from ..collaborators.base import EntityStore, MessagingClient, WebhookTransport


class NodeType(str, Enum):
    """Closed set of node types a flow graph may contain."""

    TRIGGER = "trigger"
    MESSAGE = "message"
    DELAY = "delay"
    CONDITION = "condition"
    TAG = "tag"
    WEBHOOK = "webhook"
    END = "end"


class ExecutionStatus(str, Enum):
    """Lifecycle states of an execution."""

    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)


class LogStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


# --- Flow Graph Types ---


@dataclass
class Node:
    """A typed unit of work in a flow. Position is editor-only."""

    id: str
    type: NodeType
    config: dict[str, Any] = field(default_factory=dict)
    position: dict[str, float] | None = None


@dataclass
class Edge:
    """Directed transition between two nodes.

    ``branch_label`` is only meaningful when the source is a condition node.
    """

    id: str
    source: str
    target: str
    branch_label: str | None = None


@dataclass
class Flow:
    """Persisted flow definition with its metadata and counters."""

    id: str
    name: str
    trigger_type: str
    nodes: list[Node]
    edges: list[Edge]
    trigger_config: dict[str, Any] = field(default_factory=dict)
    description: str | None = None
    is_active: bool = False
    is_draft: bool = True
    total_executions: int = 0
    successful_executions: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def get_node(self, node_id: str) -> Node | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def outgoing(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def trigger_nodes(self) -> list[Node]:
        return [n for n in self.nodes if n.type == NodeType.TRIGGER]


# --- Execution Types ---


@dataclass(frozen=True)
class EntitySnapshot:
    """Immutable view of the target entity taken when a run starts."""

    entity_id: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    tags: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "tags", frozenset(self.tags))

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    @classmethod
    def empty(cls, entity_id: str) -> EntitySnapshot:
        return cls(entity_id=entity_id)


@dataclass
class HandlerResult:
    """Outcome of a single node handler invocation."""

    message: str
    condition_result: bool | None = None
    delay_ms: int | None = None


@dataclass
class HandlerContext:
    """Per-run collaborators and identifiers handed to node handlers."""

    execution_id: str
    entity_id: str
    trigger_event: str
    entity_store: EntityStore
    messaging: MessagingClient
    webhook: WebhookTransport
    strict_delivery: bool = False


@dataclass(frozen=True)
class LogEntry:
    """One append-only execution log entry."""

    sequence: int
    node_id: str
    type: str
    status: LogStatus
    timestamp: datetime
    detail: str


@dataclass
class ExecutionRecord:
    """Execution record for history and resumption."""

    id: str
    flow_id: str
    entity_id: str
    trigger_event: str
    status: ExecutionStatus
    started_at: datetime
    current_node_id: str | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    resume_after: datetime | None = None
    execution_log: list[LogEntry] = field(default_factory=list)


@dataclass
class RunResult:
    """Definite answer returned by execute and resume."""

    success: bool
    execution_id: str | None = None
    status: ExecutionStatus | None = None
    nodes_processed: int = 0
    error: str | None = None
    message: str | None = None

    @classmethod
    def inactive(cls, flow_id: str) -> RunResult:
        return cls(success=False, message=f"Flow is not active: {flow_id}")
