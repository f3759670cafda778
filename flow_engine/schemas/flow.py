"""Flow-related Pydantic schemas."""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

NodeTypeName = Literal["trigger", "message", "delay", "condition", "tag", "webhook", "end"]
TriggerTypeName = Literal["new_lead", "payment_failed", "trial_expiring", "tag_added", "manual"]


class NodeSchema(BaseModel):
    """Schema for a node in a flow graph."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "message-1",
                "type": "message",
                "config": {"channel": "whatsapp", "customMessage": "Hi {{name}}"},
                "position": {"x": 250, "y": 120},
            }
        },
    )

    id: str = Field(..., min_length=1, description="Stable node id, unique within the flow")
    type: NodeTypeName = Field(..., description="Node type")
    config: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("config", "data"),
        description="Type-specific configuration",
    )
    position: dict[str, float] | None = Field(None, description="Editor position {x, y}")


class EdgeSchema(BaseModel):
    """Schema for an edge between two nodes."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "e-condition-1-tag-1",
                "source": "condition-1",
                "target": "tag-1",
                "branchLabel": "true",
            }
        },
    )

    id: str = Field(..., min_length=1)
    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")
    branch_label: Literal["true", "false"] | None = Field(
        None,
        validation_alias=AliasChoices("branch_label", "branchLabel", "sourceHandle"),
        serialization_alias="branchLabel",
        description="Branch taken from a condition node",
    )


class FlowCreateRequest(BaseModel):
    """Request schema for creating a flow."""

    name: str = Field(..., min_length=1, max_length=255, description="Flow name")
    description: str | None = Field(None, max_length=1000)
    trigger_type: TriggerTypeName = Field("manual", description="Event that starts the flow")
    trigger_config: dict[str, Any] = Field(default_factory=dict)
    nodes: list[NodeSchema] = Field(
        default_factory=list, description="Nodes; a default trigger is added when empty"
    )
    edges: list[EdgeSchema] = Field(default_factory=list)


class FlowUpdateRequest(BaseModel):
    """Request schema for replacing a flow document.

    ``nodes`` and ``edges`` are required: the graph is replaced as a whole.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    trigger_type: TriggerTypeName | None = None
    trigger_config: dict[str, Any] | None = None
    nodes: list[NodeSchema]
    edges: list[EdgeSchema]


class FlowListItem(BaseModel):
    """Schema for flow in list response."""

    id: str
    name: str
    trigger_type: str
    is_active: bool
    is_draft: bool
    node_count: int
    total_executions: int
    successful_executions: int
    updated_at: str


class FlowDetailResponse(BaseModel):
    """Detailed flow response."""

    id: str
    name: str
    description: str | None
    trigger_type: str
    trigger_config: dict[str, Any]
    nodes: list[NodeSchema]
    edges: list[EdgeSchema]
    is_active: bool
    is_draft: bool
    total_executions: int
    successful_executions: int
    created_at: str
    updated_at: str
