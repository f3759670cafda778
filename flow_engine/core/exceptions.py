"""Custom exceptions for the flow engine."""

from typing import Any


class FlowEngineError(Exception):
    """Base exception for all flow engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(FlowEngineError):
    """Raised when a flow definition cannot be executed or activated.

    Not retryable: the flow itself has to be fixed.
    """

    def __init__(
        self,
        message: str,
        flow_id: str | None = None,
        problems: list[str] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            details={"flow_id": flow_id, "problems": problems or []},
        )
        self.flow_id = flow_id
        self.problems = problems or []


class FlowNotFoundError(ConfigurationError):
    """Raised when a flow is not found."""

    def __init__(self, flow_id: str) -> None:
        super().__init__(message=f"Flow not found: {flow_id}", flow_id=flow_id)


class ExecutionNotFoundError(FlowEngineError):
    """Raised when an execution record is not found."""

    def __init__(self, execution_id: str) -> None:
        super().__init__(
            message=f"Execution not found: {execution_id}",
            details={"execution_id": execution_id},
        )
        self.execution_id = execution_id


class ExecutionNotResumableError(FlowEngineError):
    """Raised when resume is requested for an execution that is not paused."""

    def __init__(self, execution_id: str, status: str) -> None:
        super().__init__(
            message=f"Execution {execution_id} is {status}, only paused executions can be resumed",
            details={"execution_id": execution_id, "status": status},
        )
        self.execution_id = execution_id
        self.status = status


class EntityNotFoundError(FlowEngineError):
    """Raised when the target entity does not exist in the entity store."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(
            message=f"Entity not found: {entity_id}",
            details={"entity_id": entity_id},
        )
        self.entity_id = entity_id


class ValidationError(FlowEngineError):
    """Raised when a flow document fails validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )
        self.field = field


class HandlerError(FlowEngineError):
    """Raised when a node handler fails. Marks the execution failed."""

    def __init__(self, message: str, node_id: str, node_type: str) -> None:
        super().__init__(
            message=message,
            details={"node_id": node_id, "node_type": node_type},
        )
        self.node_id = node_id
        self.node_type = node_type


class ChannelUnavailable(FlowEngineError):
    """Raised when an entity has no contact info for a message channel."""

    def __init__(self, channel: str, entity_id: str | None = None) -> None:
        super().__init__(
            message=f"Channel unavailable: no {channel} contact for entity {entity_id}",
            details={"channel": channel, "entity_id": entity_id},
        )
        self.channel = channel
        self.entity_id = entity_id


class NetworkError(FlowEngineError):
    """Raised by outbound collaborators when the transport fails."""

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message=message, details={"target": target})
        self.target = target


class StepBudgetExceeded(FlowEngineError):
    """Raised when an execution runs past the step budget."""

    def __init__(self, max_steps: int) -> None:
        super().__init__(
            message="execution exceeded max steps",
            details={"max_steps": max_steps},
        )
        self.max_steps = max_steps
