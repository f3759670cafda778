"""Small builders for flow graphs used across the test suite."""

from __future__ import annotations

from typing import Any

from flow_engine.engine.types import Edge, Flow, Node, NodeType


def node(node_id: str, node_type: str, **config: Any) -> Node:
    return Node(id=node_id, type=NodeType(node_type), config=config)


def edge(source: str, target: str, label: str | None = None) -> Edge:
    return Edge(id=f"e-{source}-{target}", source=source, target=target, branch_label=label)


def flow(
    nodes: list[Node],
    edges: list[Edge],
    active: bool = True,
    trigger_type: str = "manual",
    name: str = "Test flow",
) -> Flow:
    return Flow(
        id="",
        name=name,
        trigger_type=trigger_type,
        nodes=nodes,
        edges=edges,
        is_active=active,
        is_draft=not active,
    )


def vip_flow(trigger_type: str = "manual", active: bool = True) -> Flow:
    """trigger -> condition(lifecycle_stage == CUSTOMER) -> tag vip | whatsapp welcome -> end."""
    return flow(
        nodes=[
            node("trigger-1", "trigger", type=trigger_type),
            node("condition-1", "condition", field="lifecycle_stage", operator="equals", value="CUSTOMER"),
            node("tag-1", "tag", action="add", tagName="vip"),
            node("message-1", "message", channel="whatsapp", customMessage="Welcome"),
            node("end-1", "end"),
        ],
        edges=[
            edge("trigger-1", "condition-1"),
            edge("condition-1", "tag-1", "true"),
            edge("condition-1", "message-1", "false"),
            edge("tag-1", "end-1"),
            edge("message-1", "end-1"),
        ],
        trigger_type=trigger_type,
        active=active,
    )
