"""Execution service for running flows and browsing their history."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from ..core.exceptions import ConfigurationError, ExecutionNotFoundError
from ..engine.types import ExecutionRecord, ExecutionStatus, RunResult
from ..schemas.execution import (
    ExecutionDetailResponse,
    ExecutionListItem,
    FlowRunResponse,
    LogEntrySchema,
    RunResultResponse,
)

if TYPE_CHECKING:
    from ..engine.executor import FlowExecutor
    from ..repositories import ExecutionRepository, FlowRepository

logger = logging.getLogger(__name__)


class ExecutionService:
    """Service for flow execution operations."""

    def __init__(
        self,
        executor: FlowExecutor,
        execution_repo: ExecutionRepository,
        flow_repo: FlowRepository,
    ) -> None:
        self._executor = executor
        self._execution_repo = execution_repo
        self._flow_repo = flow_repo

    async def execute(self, flow_id: str, entity_id: str, trigger_event: str) -> RunResultResponse:
        """Run one flow against one entity."""
        result = await self._executor.execute(flow_id, entity_id, trigger_event)
        return self._to_response(result)

    async def resume(self, execution_id: str) -> RunResultResponse:
        """Continue a paused execution."""
        result = await self._executor.resume(execution_id)
        return self._to_response(result)

    async def fire_event(self, trigger_event: str, entity_id: str) -> list[FlowRunResponse]:
        """
        Start every active flow whose trigger type matches the event.

        A flow with a broken trigger configuration is reported in its own
        result and does not stop the other flows from running.
        """
        flows = await self._flow_repo.list(active=True, trigger_type=trigger_event)
        logger.info(
            "Event %s for entity %s matched %d active flow(s)", trigger_event, entity_id, len(flows)
        )

        results: list[FlowRunResponse] = []
        for flow in flows:
            try:
                result = await self._executor.execute(flow.id, entity_id, trigger_event)
            except ConfigurationError as e:
                logger.warning("Flow %s not started: %s", flow.id, e.message)
                result = RunResult(success=False, error=e.message)
            results.append(FlowRunResponse(flow_id=flow.id, **self._to_response(result).model_dump()))
        return results

    async def resume_due(self, now: datetime | None = None) -> list[RunResultResponse]:
        """Resume every paused execution whose resume time has passed."""
        due = await self._execution_repo.list_due(now or datetime.now())
        results = []
        for execution in due:
            result = await self._executor.resume(execution.id)
            results.append(self._to_response(result))
        return results

    async def list_executions(
        self,
        flow_id: str | None = None,
        status: str | None = None,
    ) -> list[ExecutionListItem]:
        """List executions, optionally filtered by flow and status."""
        executions = await self._execution_repo.list(
            flow_id=flow_id,
            status=ExecutionStatus(status) if status else None,
        )
        return [self._to_list_item(e) for e in executions]

    async def get_execution(self, execution_id: str) -> ExecutionDetailResponse:
        """Get an execution with its ordered log."""
        execution = await self._execution_repo.get(execution_id)
        if not execution:
            raise ExecutionNotFoundError(execution_id)

        return ExecutionDetailResponse(
            **self._to_list_item(execution).model_dump(),
            resume_after=execution.resume_after.isoformat() if execution.resume_after else None,
            execution_log=[
                LogEntrySchema(
                    sequence=entry.sequence,
                    node_id=entry.node_id,
                    type=entry.type,
                    status=entry.status.value,
                    timestamp=entry.timestamp.isoformat(),
                    detail=entry.detail,
                )
                for entry in execution.execution_log
            ],
        )

    def _to_response(self, result: RunResult) -> RunResultResponse:
        return RunResultResponse(
            success=result.success,
            execution_id=result.execution_id,
            status=result.status.value if result.status else None,
            nodes_processed=result.nodes_processed,
            error=result.error,
            message=result.message,
        )

    def _to_list_item(self, execution: ExecutionRecord) -> ExecutionListItem:
        return ExecutionListItem(
            id=execution.id,
            flow_id=execution.flow_id,
            entity_id=execution.entity_id,
            trigger_event=execution.trigger_event,
            status=execution.status.value,
            current_node_id=execution.current_node_id,
            started_at=execution.started_at.isoformat(),
            completed_at=execution.completed_at.isoformat() if execution.completed_at else None,
            error_message=execution.error_message,
        )
