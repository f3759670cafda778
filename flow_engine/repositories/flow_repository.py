"""Flow repository for database persistence."""

from __future__ import annotations

import time
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..db.models import FlowModel
from ..engine.types import Edge, Flow, Node, NodeType


def node_to_dict(node: Node) -> dict[str, Any]:
    return {
        "id": node.id,
        "type": node.type.value,
        "config": node.config,
        "position": node.position,
    }


def node_from_dict(data: dict[str, Any]) -> Node:
    return Node(
        id=data["id"],
        type=NodeType(data["type"]),
        config=data.get("config") or {},
        position=data.get("position"),
    )


def edge_to_dict(edge: Edge) -> dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "branchLabel": edge.branch_label,
    }


def edge_from_dict(data: dict[str, Any]) -> Edge:
    return Edge(
        id=data["id"],
        source=data["source"],
        target=data["target"],
        branch_label=data.get("branchLabel"),
    )


class FlowRepository:
    """Repository for flow definitions (the graph store)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, flow: Flow) -> Flow:
        """Persist a new flow. Counters always start at zero."""
        now = datetime.now()

        db_flow = FlowModel(
            id=flow.id or self._generate_id(),
            name=flow.name,
            description=flow.description,
            trigger_type=flow.trigger_type,
            trigger_config=flow.trigger_config,
            nodes=[node_to_dict(n) for n in flow.nodes],
            edges=[edge_to_dict(e) for e in flow.edges],
            is_active=flow.is_active,
            is_draft=flow.is_draft,
            total_executions=0,
            successful_executions=0,
            created_at=now,
            updated_at=now,
        )

        self._session.add(db_flow)
        await self._session.commit()
        await self._session.refresh(db_flow)

        return self._to_flow(db_flow)

    async def get(self, flow_id: str) -> Flow | None:
        """Get a flow by ID."""
        result = await self._session.get(FlowModel, flow_id, populate_existing=True)
        if not result:
            return None
        return self._to_flow(result)

    async def list(
        self,
        active: bool | None = None,
        trigger_type: str | None = None,
    ) -> list[Flow]:
        """List flows, most recently updated first."""
        statement = select(FlowModel).order_by(FlowModel.updated_at.desc())

        if active is not None:
            statement = statement.where(FlowModel.is_active == active)
        if trigger_type:
            statement = statement.where(FlowModel.trigger_type == trigger_type)

        result = await self._session.execute(statement)
        return [self._to_flow(f) for f in result.scalars().all()]

    async def replace(self, flow: Flow) -> Flow | None:
        """Replace a flow's document. Nodes and edges are swapped as a whole."""
        db_flow = await self._session.get(FlowModel, flow.id)
        if not db_flow:
            return None

        db_flow.name = flow.name
        db_flow.description = flow.description
        db_flow.trigger_type = flow.trigger_type
        db_flow.trigger_config = flow.trigger_config
        db_flow.nodes = [node_to_dict(n) for n in flow.nodes]
        db_flow.edges = [edge_to_dict(e) for e in flow.edges]
        db_flow.updated_at = datetime.now()

        await self._session.commit()
        await self._session.refresh(db_flow)

        return self._to_flow(db_flow)

    async def set_active(self, flow_id: str, active: bool) -> Flow | None:
        """Set flow active state. Activating also leaves draft state."""
        db_flow = await self._session.get(FlowModel, flow_id)
        if not db_flow:
            return None

        db_flow.is_active = active
        if active:
            db_flow.is_draft = False
        db_flow.updated_at = datetime.now()

        await self._session.commit()
        await self._session.refresh(db_flow)

        return self._to_flow(db_flow)

    async def increment_counters(self, flow_id: str, succeeded: bool) -> None:
        """Count one finished execution in a single UPDATE statement."""
        values: dict[str, Any] = {"total_executions": FlowModel.total_executions + 1}
        if succeeded:
            values["successful_executions"] = FlowModel.successful_executions + 1

        await self._session.execute(
            update(FlowModel).where(FlowModel.id == flow_id).values(**values)
        )
        await self._session.commit()

    async def delete(self, flow_id: str) -> bool:
        """Delete a flow."""
        db_flow = await self._session.get(FlowModel, flow_id)
        if not db_flow:
            return False

        await self._session.delete(db_flow)
        await self._session.commit()
        return True

    def _generate_id(self) -> str:
        """Generate a unique flow ID."""
        return f"flow_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"

    def _to_flow(self, db_flow: FlowModel) -> Flow:
        """Convert database model to Flow."""
        return Flow(
            id=db_flow.id,
            name=db_flow.name,
            description=db_flow.description,
            trigger_type=db_flow.trigger_type,
            trigger_config=dict(db_flow.trigger_config or {}),
            nodes=[node_from_dict(n) for n in db_flow.nodes or []],
            edges=[edge_from_dict(e) for e in db_flow.edges or []],
            is_active=db_flow.is_active,
            is_draft=db_flow.is_draft,
            total_executions=db_flow.total_executions,
            successful_executions=db_flow.successful_executions,
            created_at=db_flow.created_at,
            updated_at=db_flow.updated_at,
        )
