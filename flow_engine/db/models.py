"""SQLModel database models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlmodel import Column, Field, SQLModel
from sqlalchemy import JSON


class FlowModel(SQLModel, table=True):
    """Automation flow database model."""

    __tablename__ = "automation_flows"

    id: str = Field(primary_key=True)
    name: str = Field(index=True)
    description: str | None = Field(default=None)
    trigger_type: str = Field(default="manual", index=True)
    trigger_config: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # Whole graph documents, replaced as a unit on every update
    nodes: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    edges: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    is_active: bool = Field(default=False, index=True)
    is_draft: bool = Field(default=True)
    total_executions: int = Field(default=0)
    successful_executions: int = Field(default=0)

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class ExecutionModel(SQLModel, table=True):
    """Flow execution database model."""

    __tablename__ = "flow_executions"

    id: str = Field(primary_key=True)
    flow_id: str = Field(index=True)
    entity_id: str = Field(index=True)
    trigger_event: str

    status: str = Field(index=True)  # running, paused, completed, failed
    current_node_id: str | None = Field(default=None)
    error_message: str | None = Field(default=None)

    started_at: datetime = Field(default_factory=datetime.now, index=True)
    completed_at: datetime | None = Field(default=None)
    resume_after: datetime | None = Field(default=None, index=True)


class ExecutionLogEntryModel(SQLModel, table=True):
    """Execution log entry. Rows are inserted, never updated."""

    __tablename__ = "execution_log_entries"

    id: int | None = Field(default=None, primary_key=True)
    execution_id: str = Field(index=True)
    sequence: int
    node_id: str
    node_type: str
    status: str  # success, error
    detail: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class ContactModel(SQLModel, table=True):
    """Customer record that flows act upon."""

    __tablename__ = "contacts"

    id: str = Field(primary_key=True)
    full_name: str | None = Field(default=None)
    email: str | None = Field(default=None, index=True)
    phone: str | None = Field(default=None)
    phone_e164: str | None = Field(default=None)
    lifecycle_stage: str | None = Field(default=None, index=True)
    total_spend: float = Field(default=0)
    last_payment_status: str | None = Field(default=None)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
