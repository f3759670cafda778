"""Execution-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ExecuteFlowRequest(BaseModel):
    """Request body for running a flow against one entity."""

    entity_id: str = Field(..., min_length=1, description="Target customer id")
    trigger_event: str = Field("manual", description="Event that fired")


class FireEventRequest(BaseModel):
    """Request body for fanning an event out to every matching active flow."""

    trigger_event: str = Field(..., min_length=1)
    entity_id: str = Field(..., min_length=1)


class RunResultResponse(BaseModel):
    """Result of execute or resume."""

    success: bool
    execution_id: str | None = None
    status: str | None = Field(None, description="running, paused, completed or failed")
    nodes_processed: int = 0
    error: str | None = None
    message: str | None = None


class FlowRunResponse(RunResultResponse):
    """Run result tagged with the flow it belongs to."""

    flow_id: str


class LogEntrySchema(BaseModel):
    """Schema for one execution log entry."""

    sequence: int
    node_id: str
    type: str
    status: str
    timestamp: str
    detail: str


class ExecutionListItem(BaseModel):
    """Schema for execution in list response."""

    id: str
    flow_id: str
    entity_id: str
    trigger_event: str
    status: str
    current_node_id: str | None
    started_at: str
    completed_at: str | None
    error_message: str | None


class ExecutionDetailResponse(ExecutionListItem):
    """Detailed execution response with the ordered log."""

    resume_after: str | None
    execution_log: list[LogEntrySchema]
