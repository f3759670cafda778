"""Execution repository for database persistence."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..db.models import ExecutionLogEntryModel, ExecutionModel
from ..engine.types import ExecutionRecord, ExecutionStatus, LogEntry, LogStatus


class ExecutionRepository:
    """Repository for executions and their append-only logs."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        flow_id: str,
        entity_id: str,
        trigger_event: str,
        current_node_id: str,
    ) -> ExecutionRecord:
        """Create a running execution positioned at ``current_node_id``."""
        db_execution = ExecutionModel(
            id=self._generate_id(),
            flow_id=flow_id,
            entity_id=entity_id,
            trigger_event=trigger_event,
            status=ExecutionStatus.RUNNING.value,
            current_node_id=current_node_id,
            started_at=datetime.now(),
        )

        self._session.add(db_execution)
        await self._session.commit()
        await self._session.refresh(db_execution)

        return self._to_execution_record(db_execution, [])

    async def get(self, execution_id: str) -> ExecutionRecord | None:
        """Get an execution with its full log."""
        db_execution = await self._session.get(
            ExecutionModel, execution_id, populate_existing=True
        )
        if not db_execution:
            return None
        log = await self.get_log(execution_id)
        return self._to_execution_record(db_execution, log)

    async def list(
        self,
        flow_id: str | None = None,
        status: ExecutionStatus | None = None,
        limit: int = 50,
    ) -> list[ExecutionRecord]:
        """List executions, newest first. Logs are not loaded."""
        statement = select(ExecutionModel).order_by(ExecutionModel.started_at.desc())

        if flow_id:
            statement = statement.where(ExecutionModel.flow_id == flow_id)
        if status:
            statement = statement.where(ExecutionModel.status == ExecutionStatus(status).value)

        result = await self._session.execute(statement.limit(limit))
        return [self._to_execution_record(e, []) for e in result.scalars().all()]

    async def list_due(self, now: datetime) -> list[ExecutionRecord]:
        """Paused executions whose resume time has passed."""
        statement = (
            select(ExecutionModel)
            .where(ExecutionModel.status == ExecutionStatus.PAUSED.value)
            .where(ExecutionModel.resume_after <= now)
            .order_by(ExecutionModel.resume_after)
        )
        result = await self._session.execute(statement)
        return [self._to_execution_record(e, []) for e in result.scalars().all()]

    async def append_log(
        self,
        execution_id: str,
        node_id: str,
        node_type: str,
        status: LogStatus,
        detail: str,
    ) -> LogEntry:
        """Insert the next log entry. Existing entries are never touched."""
        result = await self._session.execute(
            select(func.max(ExecutionLogEntryModel.sequence)).where(
                ExecutionLogEntryModel.execution_id == execution_id
            )
        )
        last_sequence = result.scalar() or 0

        entry = ExecutionLogEntryModel(
            execution_id=execution_id,
            sequence=last_sequence + 1,
            node_id=node_id,
            node_type=node_type,
            status=LogStatus(status).value,
            detail=detail,
            timestamp=datetime.now(),
        )
        self._session.add(entry)
        await self._session.commit()

        return self._to_log_entry(entry)

    async def get_log(self, execution_id: str) -> list[LogEntry]:
        """Get the ordered execution log."""
        statement = (
            select(ExecutionLogEntryModel)
            .where(ExecutionLogEntryModel.execution_id == execution_id)
            .order_by(ExecutionLogEntryModel.sequence)
        )
        result = await self._session.execute(statement)
        return [self._to_log_entry(e) for e in result.scalars().all()]

    async def update_state(
        self,
        execution_id: str,
        status: ExecutionStatus,
        current_node_id: str | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
        resume_after: datetime | None = None,
    ) -> ExecutionRecord | None:
        """Overwrite the mutable state columns of an execution."""
        db_execution = await self._session.get(ExecutionModel, execution_id)
        if not db_execution:
            return None

        db_execution.status = ExecutionStatus(status).value
        if current_node_id is not None:
            db_execution.current_node_id = current_node_id
        db_execution.completed_at = completed_at
        db_execution.error_message = error_message
        db_execution.resume_after = resume_after

        await self._session.commit()
        await self._session.refresh(db_execution)

        return self._to_execution_record(db_execution, [])

    async def set_current_node(self, execution_id: str, node_id: str) -> None:
        """Move the execution's cursor to ``node_id``."""
        db_execution = await self._session.get(ExecutionModel, execution_id)
        if db_execution and db_execution.current_node_id != node_id:
            db_execution.current_node_id = node_id
            await self._session.commit()

    def _generate_id(self) -> str:
        """Generate unique execution ID."""
        return f"exec_{int(datetime.now().timestamp() * 1000)}_{uuid.uuid4().hex[:7]}"

    def _to_log_entry(self, entry: ExecutionLogEntryModel) -> LogEntry:
        return LogEntry(
            sequence=entry.sequence,
            node_id=entry.node_id,
            type=entry.node_type,
            status=LogStatus(entry.status),
            timestamp=entry.timestamp,
            detail=entry.detail,
        )

    def _to_execution_record(
        self,
        db_execution: ExecutionModel,
        log: list[LogEntry],
    ) -> ExecutionRecord:
        """Convert database model to ExecutionRecord."""
        return ExecutionRecord(
            id=db_execution.id,
            flow_id=db_execution.flow_id,
            entity_id=db_execution.entity_id,
            trigger_event=db_execution.trigger_event,
            status=ExecutionStatus(db_execution.status),
            current_node_id=db_execution.current_node_id,
            started_at=db_execution.started_at,
            completed_at=db_execution.completed_at,
            error_message=db_execution.error_message,
            resume_after=db_execution.resume_after,
            execution_log=log,
        )
