"""Core flow engine components."""

from .types import (
    NodeType,
    ExecutionStatus,
    LogStatus,
    Node,
    Edge,
    Flow,
    EntitySnapshot,
    HandlerContext,
    HandlerResult,
    LogEntry,
    ExecutionRecord,
    RunResult,
)
from .graph import structural_problems, validate_flow, select_next_edge
from .handler_registry import HandlerRegistry, handler_registry, register_all_handlers
from .recorder import ExecutionRecorder
from .executor import FlowExecutor

__all__ = [
    "NodeType",
    "ExecutionStatus",
    "LogStatus",
    "Node",
    "Edge",
    "Flow",
    "EntitySnapshot",
    "HandlerContext",
    "HandlerResult",
    "LogEntry",
    "ExecutionRecord",
    "RunResult",
    "structural_problems",
    "validate_flow",
    "select_next_edge",
    "HandlerRegistry",
    "handler_registry",
    "register_all_handlers",
    "ExecutionRecorder",
    "FlowExecutor",
]
