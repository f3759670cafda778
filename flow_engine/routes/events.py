"""Event intake routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from ..core.dependencies import get_execution_service
from ..services.execution_service import ExecutionService
from ..schemas.execution import FireEventRequest, FlowRunResponse

router = APIRouter(prefix="/events")


ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]


@router.post("", response_model=list[FlowRunResponse])
async def fire_event(
    body: FireEventRequest,
    service: ExecutionServiceDep,
) -> list[FlowRunResponse]:
    """Start every active flow listening for this event."""
    return await service.fire_event(body.trigger_event, body.entity_id)
