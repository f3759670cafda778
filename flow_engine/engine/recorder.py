"""Execution recorder - durable execution trail and flow counters."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .types import ExecutionRecord, ExecutionStatus, LogEntry, LogStatus, Node

if TYPE_CHECKING:
    from ..repositories import ExecutionRepository, FlowRepository

logger = logging.getLogger(__name__)


class ExecutionRecorder:
    """Writes execution state and the append-only log as a run progresses."""

    def __init__(
        self,
        execution_repo: ExecutionRepository,
        flow_repo: FlowRepository,
    ) -> None:
        self._execution_repo = execution_repo
        self._flow_repo = flow_repo

    async def start(
        self,
        flow_id: str,
        entity_id: str,
        trigger_event: str,
        trigger_node_id: str,
    ) -> ExecutionRecord:
        """Create the execution record, positioned at the trigger node."""
        execution = await self._execution_repo.create(
            flow_id=flow_id,
            entity_id=entity_id,
            trigger_event=trigger_event,
            current_node_id=trigger_node_id,
        )
        logger.info(
            "Execution %s started for flow %s, entity %s (%s)",
            execution.id,
            flow_id,
            entity_id,
            trigger_event,
        )
        return execution

    async def enter_node(self, execution_id: str, node: Node) -> None:
        await self._execution_repo.set_current_node(execution_id, node.id)

    async def log_step(
        self,
        execution_id: str,
        node: Node,
        status: LogStatus,
        detail: str,
    ) -> LogEntry:
        entry = await self._execution_repo.append_log(
            execution_id=execution_id,
            node_id=node.id,
            node_type=node.type.value,
            status=status,
            detail=detail,
        )
        logger.debug("Execution %s #%d %s(%s): %s", execution_id, entry.sequence, node.type.value, node.id, detail)
        return entry

    async def pause(self, execution_id: str, next_node_id: str, delay_ms: int) -> ExecutionRecord | None:
        """Park the execution on the node that should run after the delay."""
        resume_after = datetime.now() + timedelta(milliseconds=delay_ms)
        record = await self._execution_repo.update_state(
            execution_id,
            ExecutionStatus.PAUSED,
            current_node_id=next_node_id,
            resume_after=resume_after,
        )
        logger.info("Execution %s paused until %s at node %s", execution_id, resume_after.isoformat(), next_node_id)
        return record

    async def mark_resumed(self, execution_id: str) -> ExecutionRecord | None:
        return await self._execution_repo.update_state(execution_id, ExecutionStatus.RUNNING)

    async def finish(
        self,
        execution_id: str,
        flow_id: str,
        status: ExecutionStatus,
        error_message: str | None = None,
        count: bool = True,
    ) -> ExecutionRecord | None:
        """Move the execution to a terminal status and update flow counters."""
        if not status.is_terminal:
            raise ValueError(f"Not a terminal status: {status.value}")

        record = await self._execution_repo.update_state(
            execution_id,
            status,
            completed_at=datetime.now(),
            error_message=error_message,
        )
        if count:
            await self._flow_repo.increment_counters(
                flow_id, succeeded=status == ExecutionStatus.COMPLETED
            )

        if status == ExecutionStatus.COMPLETED:
            logger.info("Execution %s completed", execution_id)
        else:
            logger.warning("Execution %s failed: %s", execution_id, error_message)
        return record
