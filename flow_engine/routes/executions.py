"""Execution routes."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.exceptions import ExecutionNotFoundError, ExecutionNotResumableError
from ..core.dependencies import get_execution_service
from ..services.execution_service import ExecutionService
from ..schemas.execution import (
    ExecutionDetailResponse,
    ExecutionListItem,
    RunResultResponse,
)

router = APIRouter(prefix="/executions")


# Type alias for dependency injection
ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]


@router.get("", response_model=list[ExecutionListItem])
async def list_executions(
    service: ExecutionServiceDep,
    flow_id: str | None = Query(None, description="Filter by flow ID"),
    status: Literal["running", "paused", "completed", "failed"] | None = Query(
        None, description="Filter by status"
    ),
) -> list[ExecutionListItem]:
    """List execution history."""
    return await service.list_executions(flow_id, status)


@router.post("/resume-due", response_model=list[RunResultResponse])
async def resume_due(service: ExecutionServiceDep) -> list[RunResultResponse]:
    """Resume every paused execution whose delay has elapsed."""
    return await service.resume_due()


@router.get("/{execution_id}", response_model=ExecutionDetailResponse)
async def get_execution(
    execution_id: str,
    service: ExecutionServiceDep,
) -> ExecutionDetailResponse:
    """Get execution details with the ordered log."""
    try:
        return await service.get_execution(execution_id)
    except ExecutionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{execution_id}/resume", response_model=RunResultResponse)
async def resume_execution(
    execution_id: str,
    service: ExecutionServiceDep,
) -> RunResultResponse:
    """Continue a paused execution."""
    try:
        return await service.resume(execution_id)
    except ExecutionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ExecutionNotResumableError as e:
        raise HTTPException(status_code=409, detail=e.message)
