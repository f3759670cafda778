"""Flow service - the graph store contract."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.exceptions import (
    ConfigurationError,
    FlowNotFoundError,
    ValidationError,
)
from ..engine.graph import structural_problems, validate_flow
from ..engine.types import Edge, Flow, Node, NodeType
from ..schemas.flow import (
    EdgeSchema,
    FlowCreateRequest,
    FlowDetailResponse,
    FlowListItem,
    FlowUpdateRequest,
    NodeSchema,
)

if TYPE_CHECKING:
    from ..repositories import FlowRepository

logger = logging.getLogger(__name__)

DEFAULT_TRIGGER_ID = "trigger-1"


class FlowService:
    """Service for flow definition operations."""

    def __init__(self, flow_repo: FlowRepository) -> None:
        self._flow_repo = flow_repo

    async def list_flows(self) -> list[FlowListItem]:
        """List all flows."""
        flows = await self._flow_repo.list()
        return [
            FlowListItem(
                id=f.id,
                name=f.name,
                trigger_type=f.trigger_type,
                is_active=f.is_active,
                is_draft=f.is_draft,
                node_count=len(f.nodes),
                total_executions=f.total_executions,
                successful_executions=f.successful_executions,
                updated_at=f.updated_at.isoformat(),
            )
            for f in flows
        ]

    async def get_flow(self, flow_id: str) -> FlowDetailResponse:
        """Get a flow by ID."""
        return self._to_detail(await self._require(flow_id))

    async def create_flow(self, request: FlowCreateRequest) -> FlowDetailResponse:
        """Create a new flow in draft, inactive state."""
        nodes = [self._to_node(n) for n in request.nodes]
        edges = [self._to_edge(e) for e in request.edges]
        if not nodes:
            nodes = [
                Node(
                    id=DEFAULT_TRIGGER_ID,
                    type=NodeType.TRIGGER,
                    config={"type": request.trigger_type, "config": dict(request.trigger_config)},
                    position={"x": 250, "y": 50},
                )
            ]

        self._check_structure(nodes, edges)

        flow = Flow(
            id="",
            name=request.name,
            description=request.description,
            trigger_type=request.trigger_type,
            trigger_config=request.trigger_config,
            nodes=nodes,
            edges=edges,
            is_active=False,
            is_draft=True,
        )
        stored = await self._flow_repo.create(flow)
        logger.info("Created flow %s (%s)", stored.id, stored.name)
        return self._to_detail(stored)

    async def update_flow(self, flow_id: str, request: FlowUpdateRequest) -> FlowDetailResponse:
        """
        Replace a flow's document.

        The node and edge lists replace the stored ones entirely. An active
        flow must stay executable, so its new graph is fully validated.
        """
        existing = await self._require(flow_id)

        nodes = [self._to_node(n) for n in request.nodes]
        edges = [self._to_edge(e) for e in request.edges]
        self._check_structure(nodes, edges)

        updated = Flow(
            id=flow_id,
            name=request.name or existing.name,
            description=(
                request.description if request.description is not None else existing.description
            ),
            trigger_type=request.trigger_type or existing.trigger_type,
            trigger_config=(
                request.trigger_config
                if request.trigger_config is not None
                else existing.trigger_config
            ),
            nodes=nodes,
            edges=edges,
            is_active=existing.is_active,
            is_draft=existing.is_draft,
        )

        if existing.is_active:
            problems = validate_flow(updated)
            if problems:
                raise ValidationError(
                    "Active flow graph is invalid: " + "; ".join(problems), field="nodes"
                )

        stored = await self._flow_repo.replace(updated)
        if not stored:
            raise FlowNotFoundError(flow_id)
        return self._to_detail(stored)

    async def delete_flow(self, flow_id: str) -> bool:
        """Delete a flow."""
        deleted = await self._flow_repo.delete(flow_id)
        if not deleted:
            raise FlowNotFoundError(flow_id)
        logger.info("Deleted flow %s", flow_id)
        return True

    async def activate(self, flow_id: str) -> FlowDetailResponse:
        """
        Activate a flow after validating its graph.

        Raises:
            FlowNotFoundError: If the flow does not exist
            ConfigurationError: If the graph has no trigger, breaks a graph
                invariant, or no terminal node is reachable from the trigger
        """
        flow = await self._require(flow_id)

        problems = validate_flow(flow)
        if problems:
            raise ConfigurationError(
                f"Flow {flow_id} cannot be activated: " + "; ".join(problems),
                flow_id=flow_id,
                problems=problems,
            )

        updated = await self._flow_repo.set_active(flow_id, True)
        if not updated:
            raise FlowNotFoundError(flow_id)
        logger.info("Activated flow %s", flow_id)
        return self._to_detail(updated)

    async def deactivate(self, flow_id: str) -> FlowDetailResponse:
        """Stop new executions. Executions already in flight are unaffected."""
        updated = await self._flow_repo.set_active(flow_id, False)
        if not updated:
            raise FlowNotFoundError(flow_id)
        logger.info("Deactivated flow %s", flow_id)
        return self._to_detail(updated)

    async def duplicate(self, flow_id: str) -> FlowDetailResponse:
        """Clone a flow into a new draft with counters reset."""
        original = await self._require(flow_id)

        copy = Flow(
            id="",
            name=f"{original.name} (copy)",
            description=original.description,
            trigger_type=original.trigger_type,
            trigger_config=dict(original.trigger_config),
            nodes=[
                Node(id=n.id, type=n.type, config=dict(n.config), position=n.position)
                for n in original.nodes
            ],
            edges=[
                Edge(id=e.id, source=e.source, target=e.target, branch_label=e.branch_label)
                for e in original.edges
            ],
            is_active=False,
            is_draft=True,
        )
        stored = await self._flow_repo.create(copy)
        logger.info("Duplicated flow %s as %s", flow_id, stored.id)
        return self._to_detail(stored)

    async def _require(self, flow_id: str) -> Flow:
        flow = await self._flow_repo.get(flow_id)
        if not flow:
            raise FlowNotFoundError(flow_id)
        return flow

    def _check_structure(self, nodes: list[Node], edges: list[Edge]) -> None:
        problems = structural_problems(nodes, edges)
        if problems:
            raise ValidationError("; ".join(problems), field="nodes")

    def _to_node(self, schema: NodeSchema) -> Node:
        return Node(
            id=schema.id,
            type=NodeType(schema.type),
            config=dict(schema.config),
            position=schema.position,
        )

    def _to_edge(self, schema: EdgeSchema) -> Edge:
        return Edge(
            id=schema.id,
            source=schema.source,
            target=schema.target,
            branch_label=schema.branch_label,
        )

    def _to_detail(self, flow: Flow) -> FlowDetailResponse:
        return FlowDetailResponse(
            id=flow.id,
            name=flow.name,
            description=flow.description,
            trigger_type=flow.trigger_type,
            trigger_config=flow.trigger_config,
            nodes=[
                NodeSchema(id=n.id, type=n.type.value, config=n.config, position=n.position)
                for n in flow.nodes
            ],
            edges=[
                EdgeSchema(id=e.id, source=e.source, target=e.target, branch_label=e.branch_label)
                for e in flow.edges
            ],
            is_active=flow.is_active,
            is_draft=flow.is_draft,
            total_executions=flow.total_executions,
            successful_executions=flow.successful_executions,
            created_at=flow.created_at.isoformat(),
            updated_at=flow.updated_at.isoformat(),
        )
