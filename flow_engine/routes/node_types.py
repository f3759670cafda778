"""Node type catalog routes."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from ..core.dependencies import get_node_service
from ..services.node_service import NodeService

router = APIRouter(prefix="/node-types")


NodeServiceDep = Annotated[NodeService, Depends(get_node_service)]


@router.get("", response_model=list[dict[str, Any]])
async def list_node_types(service: NodeServiceDep) -> list[dict[str, Any]]:
    """List all node types with their config schemas."""
    return service.list_node_types()
