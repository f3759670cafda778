"""Delay node - computes how long the execution should stay paused."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import BaseHandler, NodeProperty, NodePropertyOption, NodeTypeDescription

if TYPE_CHECKING:
    from ..engine.types import EntitySnapshot, HandlerContext, HandlerResult, Node


UNIT_MS = {
    "seconds": 1_000,
    "minutes": 60_000,
    "hours": 3_600_000,
    "days": 86_400_000,
}


def delay_to_ms(duration: float, unit: str) -> int:
    """Convert ``duration`` in ``unit`` to milliseconds."""
    if unit not in UNIT_MS:
        raise ValueError(f"Unsupported delay unit: {unit}")
    if duration < 0:
        raise ValueError(f"Delay duration must not be negative: {duration}")
    return int(duration * UNIT_MS[unit])


class DelayHandler(BaseHandler):
    """Delay node - reports the wait in ``delay_ms``. It never sleeps."""

    node_description = NodeTypeDescription(
        name="delay",
        display_name="Delay",
        description="Wait before continuing with the next step",
        icon="fa:hourglass-half",
        properties=[
            NodeProperty(
                display_name="Duration",
                name="duration",
                type="number",
                default=1,
            ),
            NodeProperty(
                display_name="Unit",
                name="unit",
                type="options",
                default="hours",
                options=[
                    NodePropertyOption(name="Seconds", value="seconds"),
                    NodePropertyOption(name="Minutes", value="minutes"),
                    NodePropertyOption(name="Hours", value="hours"),
                    NodePropertyOption(name="Days", value="days"),
                ],
            ),
        ],
    )

    @property
    def type(self) -> str:
        return "delay"

    @property
    def description(self) -> str:
        return "Wait before continuing with the next step"

    async def handle(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        duration = self.get_config(node, "duration", 1)
        unit = self.get_config(node, "unit", "hours")

        try:
            duration = float(duration)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid delay duration: {duration!r}") from None

        delay_ms = delay_to_ms(duration, unit)
        shown = int(duration) if duration.is_integer() else duration
        return self.result(f"Delay: {shown} {unit}", delay_ms=delay_ms)
