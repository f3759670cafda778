"""
Flow graph checks and edge selection.

Nodes form an arena addressed by id; edges are plain (source, target, label)
records. Two levels of checking exist:

- ``structural_problems``: the document is well formed (unique ids, edges
  point at existing nodes). Enforced on every write, drafts included.
- ``validate_flow``: the graph is executable (one trigger with no incoming
  edges, condition nodes with exactly a "true" and a "false" edge, at most
  one outgoing edge elsewhere, and a terminal node reachable from the
  trigger). Enforced on activation.
"""

from __future__ import annotations

from collections import Counter, deque

from ..core.exceptions import ConfigurationError
from .types import Edge, Flow, Node, NodeType

BRANCH_LABELS = ("true", "false")


def structural_problems(nodes: list[Node], edges: list[Edge]) -> list[str]:
    """Problems that make a flow document malformed."""
    problems: list[str] = []

    node_ids = Counter(n.id for n in nodes)
    for node_id, count in node_ids.items():
        if count > 1:
            problems.append(f"Duplicate node id: {node_id}")

    edge_ids = Counter(e.id for e in edges)
    for edge_id, count in edge_ids.items():
        if count > 1:
            problems.append(f"Duplicate edge id: {edge_id}")

    for edge in edges:
        if edge.source not in node_ids:
            problems.append(f"Edge {edge.id} references unknown source node: {edge.source}")
        if edge.target not in node_ids:
            problems.append(f"Edge {edge.id} references unknown target node: {edge.target}")

    return problems


def validate_flow(flow: Flow) -> list[str]:
    """Return every reason the flow cannot be activated. Empty means valid."""
    problems = structural_problems(flow.nodes, flow.edges)

    triggers = flow.trigger_nodes()
    if not triggers:
        problems.append("Flow has no trigger node")
    elif len(triggers) > 1:
        problems.append(f"Flow has {len(triggers)} trigger nodes; exactly one is required")

    for trigger in triggers:
        if any(e.target == trigger.id for e in flow.edges):
            problems.append(f"Trigger node {trigger.id} must not have incoming edges")

    for node in flow.nodes:
        outgoing = flow.outgoing(node.id)
        if node.type == NodeType.CONDITION:
            labels = sorted(str(e.branch_label) for e in outgoing)
            if labels != sorted(BRANCH_LABELS):
                problems.append(
                    f'Condition node {node.id} needs exactly one "true" and one "false" edge'
                )
        elif node.type == NodeType.END:
            if outgoing:
                problems.append(f"End node {node.id} must not have outgoing edges")
        elif len(outgoing) > 1:
            problems.append(
                f"Node {node.id} has {len(outgoing)} outgoing edges; at most one is allowed"
            )

    if len(triggers) == 1 and not reaches_terminal(flow, triggers[0].id):
        problems.append("No path from the trigger reaches a terminal node")

    return problems


def reaches_terminal(flow: Flow, start_id: str) -> bool:
    """True if an end node, or a node without outgoing edges, is reachable."""
    seen: set[str] = set()
    queue: deque[str] = deque([start_id])

    while queue:
        node_id = queue.popleft()
        if node_id in seen:
            continue
        seen.add(node_id)

        node = flow.get_node(node_id)
        if node is None:
            continue

        outgoing = flow.outgoing(node_id)
        if node.type == NodeType.END or not outgoing:
            return True
        queue.extend(e.target for e in outgoing)

    return False


def select_next_edge(flow: Flow, node: Node, condition_result: bool | None = None) -> Edge | None:
    """
    Pick the edge to follow after ``node`` ran.

    Condition nodes follow the edge labelled with their boolean result; other
    nodes follow their single outgoing edge. None means the graph ends here.

    Raises:
        ConfigurationError: If a non-condition node has several outgoing edges
    """
    outgoing = flow.outgoing(node.id)

    if node.type == NodeType.CONDITION:
        label = "true" if condition_result else "false"
        return next((e for e in outgoing if e.branch_label == label), None)

    if len(outgoing) > 1:
        raise ConfigurationError(
            f"Node {node.id} has {len(outgoing)} outgoing edges; at most one is allowed",
            flow_id=flow.id,
        )
    return outgoing[0] if outgoing else None
