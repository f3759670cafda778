"""Condition node - routes the run down the true or false branch."""

from __future__ import annotations

import math
from typing import Any, TYPE_CHECKING

from .base import BaseHandler, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node


OPERATORS = ("equals", "not_equals", "greater_than", "less_than", "contains")

HAS_TAG = "has_tag"


def evaluate(field_value: Any, operator: str, compare_value: Any) -> bool:
    """Compare a snapshot value against the configured value."""
    if operator == "equals":
        return _equals(field_value, compare_value)
    elif operator == "not_equals":
        return not _equals(field_value, compare_value)
    elif operator == "greater_than":
        left, right = _to_number(field_value), _to_number(compare_value)
        if left is None or right is None:
            return False
        return left > right
    elif operator == "less_than":
        left, right = _to_number(field_value), _to_number(compare_value)
        if left is None or right is None:
            return False
        return left < right
    elif operator == "contains":
        if field_value is None:
            return False
        if isinstance(field_value, (list, tuple, set, frozenset)):
            return compare_value in field_value
        return str(compare_value) in str(field_value)
    raise ValueError(f"Unsupported condition operator: {operator}")


def _equals(left: Any, right: Any) -> bool:
    if left == right:
        return True
    # Editor values arrive as strings; compare by text when types differ
    if left is None or right is None:
        return False
    return _text(left) == _text(right)


def _text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


class ConditionHandler(BaseHandler):
    """Condition node - evaluates one field of the snapshot."""

    node_description = NodeTypeDescription(
        name="condition",
        display_name="Condition",
        description="Branch on a customer field (true/false outputs)",
        icon="fa:code-branch",
        outputs=["true", "false"],
        properties=[
            NodeProperty(
                display_name="Field",
                name="field",
                type="options",
                default="lifecycle_stage",
                required=True,
                options=[
                    NodePropertyOption(name="Lifecycle Stage", value="lifecycle_stage"),
                    NodePropertyOption(name="Total Spend", value="total_spend"),
                    NodePropertyOption(name="Has Tag", value=HAS_TAG),
                    NodePropertyOption(name="Last Payment Status", value="last_payment_status"),
                ],
            ),
            NodeProperty(
                display_name="Operator",
                name="operator",
                type="options",
                default="equals",
                options=[
                    NodePropertyOption(name="Equals", value="equals"),
                    NodePropertyOption(name="Not Equals", value="not_equals"),
                    NodePropertyOption(name="Greater Than", value="greater_than"),
                    NodePropertyOption(name="Less Than", value="less_than"),
                    NodePropertyOption(name="Contains", value="contains"),
                ],
            ),
            NodeProperty(
                display_name="Value",
                name="value",
                type="string",
                default="",
            ),
        ],
    )

    @property
    def type(self) -> str:
        return "condition"

    @property
    def description(self) -> str:
        return "Branch on a customer field (true/false outputs)"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        field = self.get_config(node, "field")
        operator = self.get_config(node, "operator", "equals")
        value = node.config.get("value")

        if operator not in OPERATORS:
            raise ValueError(f"Unsupported condition operator: {operator}")

        if field == HAS_TAG:
            # Membership test; only not_equals inverts it
            result = value in snapshot.tags
            if operator == "not_equals":
                result = not result
        else:
            result = evaluate(snapshot.get(field), operator, value)

        return self.result(
            f"Condition: {field} {operator} {value} = {str(result).lower()}",
            condition_result=result,
        )
