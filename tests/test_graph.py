"""
Tests for flow graph checks and edge selection.

Covers:
- Structural problems (duplicate ids, dangling edges)
- Activation validation (trigger count, branch labels, fan-out, reachability)
- Edge selection for condition and plain nodes
"""

import pytest

from flow_engine.core.exceptions import ConfigurationError
from flow_engine.engine.graph import (
    reaches_terminal,
    select_next_edge,
    structural_problems,
    validate_flow,
)

from .builders import edge, flow, node, vip_flow


def test_valid_flow_has_no_problems():
    assert validate_flow(vip_flow()) == []


def test_duplicate_node_ids_are_reported():
    nodes = [node("a", "trigger"), node("a", "end")]
    problems = structural_problems(nodes, [])
    assert problems == ["Duplicate node id: a"]


def test_dangling_edge_is_reported():
    nodes = [node("t", "trigger")]
    problems = structural_problems(nodes, [edge("t", "missing")])
    assert any("unknown target node: missing" in p for p in problems)


def test_flow_without_trigger_is_invalid():
    f = flow([node("end-1", "end")], [])
    assert "Flow has no trigger node" in validate_flow(f)


def test_flow_with_two_triggers_is_invalid():
    f = flow(
        [node("t1", "trigger"), node("t2", "trigger"), node("end-1", "end")],
        [edge("t1", "end-1"), edge("t2", "end-1")],
    )
    assert any("exactly one is required" in p for p in validate_flow(f))


def test_condition_needs_both_branches():
    f = flow(
        [
            node("t", "trigger"),
            node("c", "condition", field="lifecycle_stage", value="LEAD"),
            node("end-1", "end"),
        ],
        [edge("t", "c"), edge("c", "end-1", "true")],
    )
    assert any('exactly one "true" and one "false"' in p for p in validate_flow(f))


def test_plain_node_fan_out_is_invalid():
    f = flow(
        [node("t", "trigger"), node("m1", "message"), node("m2", "message")],
        [edge("t", "m1"), edge("t", "m2")],
    )
    assert any("at most one is allowed" in p for p in validate_flow(f))


def test_pure_cycle_has_no_reachable_terminal():
    f = flow(
        [node("t", "trigger"), node("d1", "delay"), node("d2", "delay")],
        [edge("t", "d1"), edge("d1", "d2"), edge("d2", "d1")],
    )
    assert not reaches_terminal(f, "t")
    assert "No path from the trigger reaches a terminal node" in validate_flow(f)


def test_implicit_terminal_counts_as_reachable():
    f = flow([node("t", "trigger"), node("m", "message")], [edge("t", "m")])
    assert reaches_terminal(f, "t")
    assert validate_flow(f) == []


@pytest.mark.parametrize("result,target", [(True, "tag-1"), (False, "message-1")])
def test_condition_selects_exactly_one_branch(result, target):
    f = vip_flow()
    selected = select_next_edge(f, f.get_node("condition-1"), result)
    assert selected.target == target


def test_plain_node_follows_single_edge():
    f = vip_flow()
    assert select_next_edge(f, f.get_node("trigger-1")).target == "condition-1"


def test_end_of_graph_returns_none():
    f = vip_flow()
    assert select_next_edge(f, f.get_node("end-1")) is None


def test_fan_out_at_runtime_raises():
    f = flow(
        [node("t", "trigger"), node("m1", "message"), node("m2", "message")],
        [edge("t", "m1"), edge("t", "m2")],
    )
    with pytest.raises(ConfigurationError):
        select_next_edge(f, f.get_node("t"))
