"""Core module for the flow engine - config, exceptions, and dependencies."""

from .config import settings, Settings
from .exceptions import (
    FlowEngineError,
    ConfigurationError,
    FlowNotFoundError,
    ExecutionNotFoundError,
    ExecutionNotResumableError,
    EntityNotFoundError,
    ValidationError,
    HandlerError,
    ChannelUnavailable,
    NetworkError,
    StepBudgetExceeded,
)
from .dependencies import (
    get_flow_repository,
    get_execution_repository,
    get_entity_store,
    get_messaging_client,
    get_webhook_transport,
    get_handler_registry,
    get_flow_executor,
    get_flow_service,
    get_execution_service,
    get_node_service,
)

__all__ = [
    # Config
    "settings",
    "Settings",
    # Exceptions
    "FlowEngineError",
    "ConfigurationError",
    "FlowNotFoundError",
    "ExecutionNotFoundError",
    "ExecutionNotResumableError",
    "EntityNotFoundError",
    "ValidationError",
    "HandlerError",
    "ChannelUnavailable",
    "NetworkError",
    "StepBudgetExceeded",
    # Dependencies
    "get_flow_repository",
    "get_execution_repository",
    "get_entity_store",
    "get_messaging_client",
    "get_webhook_transport",
    "get_handler_registry",
    "get_flow_executor",
    "get_flow_service",
    "get_execution_service",
    "get_node_service",
]
