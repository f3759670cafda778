"""Pydantic schemas for API request/response validation."""

from .flow import (
    NodeSchema,
    EdgeSchema,
    FlowCreateRequest,
    FlowUpdateRequest,
    FlowListItem,
    FlowDetailResponse,
)
from .execution import (
    ExecuteFlowRequest,
    FireEventRequest,
    RunResultResponse,
    FlowRunResponse,
    LogEntrySchema,
    ExecutionListItem,
    ExecutionDetailResponse,
)
from .common import (
    SuccessResponse,
    HealthResponse,
    RootResponse,
)

__all__ = [
    # Flow schemas
    "NodeSchema",
    "EdgeSchema",
    "FlowCreateRequest",
    "FlowUpdateRequest",
    "FlowListItem",
    "FlowDetailResponse",
    # Execution schemas
    "ExecuteFlowRequest",
    "FireEventRequest",
    "RunResultResponse",
    "FlowRunResponse",
    "LogEntrySchema",
    "ExecutionListItem",
    "ExecutionDetailResponse",
    # Common schemas
    "SuccessResponse",
    "HealthResponse",
    "RootResponse",
]
