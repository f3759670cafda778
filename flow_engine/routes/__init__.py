"""FastAPI routes for the flow engine."""

from fastapi import APIRouter

from .flows import router as flows_router
from .executions import router as executions_router
from .events import router as events_router
from .node_types import router as node_types_router

api_router = APIRouter(prefix="/api")
api_router.include_router(flows_router, tags=["Flows"])
api_router.include_router(executions_router, tags=["Executions"])
api_router.include_router(events_router, tags=["Events"])
api_router.include_router(node_types_router, tags=["Node Types"])

__all__ = ["api_router"]
