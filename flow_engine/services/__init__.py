"""Service layer for flow engine business logic."""

from .flow_service import FlowService
from .execution_service import ExecutionService
from .node_service import NodeService

__all__ = [
    "FlowService",
    "ExecutionService",
    "NodeService",
]
