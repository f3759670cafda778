"""Repository layer for data persistence."""

from .flow_repository import FlowRepository
from .execution_repository import ExecutionRepository

__all__ = [
    "FlowRepository",
    "ExecutionRepository",
]
