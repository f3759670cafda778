"""Flow definition routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from ..core.exceptions import (
    ConfigurationError,
    FlowNotFoundError,
    ValidationError,
)
from ..core.dependencies import get_execution_service, get_flow_service
from ..services.execution_service import ExecutionService
from ..services.flow_service import FlowService
from ..schemas.flow import (
    FlowCreateRequest,
    FlowDetailResponse,
    FlowListItem,
    FlowUpdateRequest,
)
from ..schemas.execution import ExecuteFlowRequest, RunResultResponse
from ..schemas.common import SuccessResponse

router = APIRouter(prefix="/flows")


# Type aliases for dependency injection
FlowServiceDep = Annotated[FlowService, Depends(get_flow_service)]
ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]


@router.get("", response_model=list[FlowListItem])
async def list_flows(service: FlowServiceDep) -> list[FlowListItem]:
    """List all flows."""
    return await service.list_flows()


@router.get("/{flow_id}", response_model=FlowDetailResponse)
async def get_flow(flow_id: str, service: FlowServiceDep) -> FlowDetailResponse:
    """Get a single flow by ID."""
    try:
        return await service.get_flow(flow_id)
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("", response_model=FlowDetailResponse, status_code=201)
async def create_flow(flow: FlowCreateRequest, service: FlowServiceDep) -> FlowDetailResponse:
    """Create a new draft flow."""
    try:
        return await service.create_flow(flow)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.put("/{flow_id}", response_model=FlowDetailResponse)
async def update_flow(
    flow_id: str,
    flow: FlowUpdateRequest,
    service: FlowServiceDep,
) -> FlowDetailResponse:
    """Replace a flow's document."""
    try:
        return await service.update_flow(flow_id, flow)
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/{flow_id}", response_model=SuccessResponse)
async def delete_flow(flow_id: str, service: FlowServiceDep) -> SuccessResponse:
    """Delete a flow."""
    try:
        await service.delete_flow(flow_id)
        return SuccessResponse(message="Flow deleted")
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{flow_id}/activate", response_model=FlowDetailResponse)
async def activate_flow(flow_id: str, service: FlowServiceDep) -> FlowDetailResponse:
    """Validate and activate a flow."""
    try:
        return await service.activate(flow_id)
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConfigurationError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": e.message, "problems": e.problems},
        )


@router.post("/{flow_id}/deactivate", response_model=FlowDetailResponse)
async def deactivate_flow(flow_id: str, service: FlowServiceDep) -> FlowDetailResponse:
    """Deactivate a flow."""
    try:
        return await service.deactivate(flow_id)
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{flow_id}/duplicate", response_model=FlowDetailResponse, status_code=201)
async def duplicate_flow(flow_id: str, service: FlowServiceDep) -> FlowDetailResponse:
    """Copy a flow into a new draft."""
    try:
        return await service.duplicate(flow_id)
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{flow_id}/execute", response_model=RunResultResponse)
async def execute_flow(
    flow_id: str,
    body: ExecuteFlowRequest,
    service: ExecutionServiceDep,
) -> RunResultResponse:
    """Run a flow against one entity."""
    try:
        return await service.execute(flow_id, body.entity_id, body.trigger_event)
    except FlowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=e.message)
