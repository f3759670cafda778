"""
Flow executor - interprets a flow graph against one target entity.

Nodes run strictly one at a time from the trigger, following a single edge
per step. A delay node parks the execution (status ``paused``) on the node
that comes after it; ``resume`` re-enters the loop there later. Nothing in
here sleeps or schedules timers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.config import settings
from ..core.exceptions import (
    ConfigurationError,
    ExecutionNotFoundError,
    ExecutionNotResumableError,
    FlowNotFoundError,
    HandlerError,
    StepBudgetExceeded,
)
from .graph import select_next_edge
from .handler_registry import HandlerRegistry, handler_registry, register_all_handlers
from .recorder import ExecutionRecorder
from .types import (
    EntitySnapshot,
    ExecutionRecord,
    ExecutionStatus,
    Flow,
    HandlerContext,
    HandlerResult,
    LogStatus,
    Node,
    NodeType,
    RunResult,
)

if TYPE_CHECKING:
    from ..collaborators.base import EntityStore, MessagingClient, WebhookTransport
    from ..repositories import ExecutionRepository, FlowRepository

logger = logging.getLogger(__name__)


class FlowExecutor:
    """Step-bounded state machine that runs and resumes executions."""

    def __init__(
        self,
        flow_repo: FlowRepository,
        execution_repo: ExecutionRepository,
        entity_store: EntityStore,
        messaging: MessagingClient,
        webhook: WebhookTransport,
        max_steps: int | None = None,
        strict_delivery: bool | None = None,
        registry: HandlerRegistry | None = None,
    ) -> None:
        if registry is None:
            register_all_handlers()
            registry = handler_registry

        self._registry = registry
        self._flow_repo = flow_repo
        self._execution_repo = execution_repo
        self._recorder = ExecutionRecorder(execution_repo, flow_repo)
        self._entity_store = entity_store
        self._messaging = messaging
        self._webhook = webhook
        self._max_steps = max_steps if max_steps is not None else settings.max_steps
        self._strict_delivery = (
            strict_delivery if strict_delivery is not None else settings.strict_delivery
        )

    async def execute(self, flow_id: str, entity_id: str, trigger_event: str) -> RunResult:
        """
        Start a new execution of a flow for one entity.

        Args:
            flow_id: Flow to run
            entity_id: Target entity the flow acts upon
            trigger_event: Event that fired (e.g. "payment_failed")

        Returns:
            RunResult; an inactive flow yields an unsuccessful result without
            creating an execution

        Raises:
            ConfigurationError: If the flow does not exist or has no single
                trigger node. No execution is created.
        """
        flow = await self._flow_repo.get(flow_id)
        if not flow:
            raise FlowNotFoundError(flow_id)

        if not flow.is_active:
            logger.info("Flow %s is not active; ignoring %s for entity %s", flow_id, trigger_event, entity_id)
            return RunResult.inactive(flow_id)

        trigger = self._find_trigger(flow)
        execution = await self._recorder.start(flow.id, entity_id, trigger_event, trigger.id)

        return await self._run(flow, execution, trigger.id, steps_taken=0)

    async def resume(self, execution_id: str) -> RunResult:
        """
        Continue a paused execution from its stored node.

        The entity snapshot is taken again, since the entity may have changed
        while the execution was paused. Deactivating the flow does not stop
        an execution that is already in flight.

        Raises:
            ExecutionNotFoundError: If the execution does not exist
            ExecutionNotResumableError: If the execution is not paused
        """
        execution = await self._execution_repo.get(execution_id)
        if not execution:
            raise ExecutionNotFoundError(execution_id)

        if execution.status != ExecutionStatus.PAUSED:
            raise ExecutionNotResumableError(execution_id, execution.status.value)

        flow = await self._flow_repo.get(execution.flow_id)
        if not flow:
            error = f"Flow not found: {execution.flow_id}"
            await self._recorder.finish(
                execution.id, execution.flow_id, ExecutionStatus.FAILED, error, count=False
            )
            return self._failed(execution.id, 0, error)

        logger.info("Resuming execution %s at node %s", execution.id, execution.current_node_id)
        await self._recorder.mark_resumed(execution.id)

        return await self._run(
            flow,
            execution,
            execution.current_node_id,
            steps_taken=len(execution.execution_log),
        )

    async def _run(
        self,
        flow: Flow,
        execution: ExecutionRecord,
        start_node_id: str | None,
        steps_taken: int,
    ) -> RunResult:
        """
        Main loop.

        ``steps_taken`` counts nodes already processed by earlier invocations
        of the same execution; the step budget covers the whole execution.
        """
        try:
            snapshot = await self._take_snapshot(execution.entity_id)
        except Exception as e:
            logger.exception("Reading entity %s failed for execution %s", execution.entity_id, execution.id)
            return await self._fail(flow, execution, 0, str(e) or type(e).__name__)

        context = HandlerContext(
            execution_id=execution.id,
            entity_id=execution.entity_id,
            trigger_event=execution.trigger_event,
            entity_store=self._entity_store,
            messaging=self._messaging,
            webhook=self._webhook,
            strict_delivery=self._strict_delivery,
        )

        current_node_id = start_node_id
        processed = 0
        steps = steps_taken

        while steps < self._max_steps:
            node = flow.get_node(current_node_id) if current_node_id else None
            if node is None:
                return await self._fail(flow, execution, processed, f"Node not found: {current_node_id}")

            steps += 1
            processed += 1
            await self._recorder.enter_node(execution.id, node)

            try:
                result = await self._invoke(node, snapshot, context)
            except HandlerError as e:
                await self._recorder.log_step(execution.id, node, LogStatus.ERROR, e.message)
                return await self._fail(flow, execution, processed, e.message)

            await self._recorder.log_step(execution.id, node, LogStatus.SUCCESS, result.message)

            if node.type == NodeType.END:
                return await self._complete(flow, execution, processed)

            try:
                edge = select_next_edge(flow, node, result.condition_result)
            except ConfigurationError as e:
                return await self._fail(flow, execution, processed, e.message)

            if edge is None:
                # No way forward: the graph ends here
                return await self._complete(flow, execution, processed)

            if node.type == NodeType.DELAY and result.delay_ms:
                await self._recorder.pause(execution.id, edge.target, result.delay_ms)
                return RunResult(
                    success=True,
                    execution_id=execution.id,
                    status=ExecutionStatus.PAUSED,
                    nodes_processed=processed,
                    message=result.message,
                )

            current_node_id = edge.target

        return await self._fail(flow, execution, processed, StepBudgetExceeded(self._max_steps).message)

    async def _invoke(
        self,
        node: Node,
        snapshot: EntitySnapshot,
        context: HandlerContext,
    ) -> HandlerResult:
        """Run the node's handler, turning any exception into a HandlerError."""
        handler = self._registry.get(node.type)
        try:
            return await handler.handle(node, snapshot, context)
        except Exception as e:
            logger.exception("Handler for %s node %s failed", node.type.value, node.id)
            raise HandlerError(str(e) or type(e).__name__, node.id, node.type.value) from e

    async def _take_snapshot(self, entity_id: str) -> EntitySnapshot:
        snapshot = await self._entity_store.read_snapshot(entity_id)
        if snapshot is None:
            logger.warning("Entity %s not found; running with an empty snapshot", entity_id)
            return EntitySnapshot.empty(entity_id)
        return snapshot

    async def _complete(self, flow: Flow, execution: ExecutionRecord, processed: int) -> RunResult:
        await self._recorder.finish(execution.id, flow.id, ExecutionStatus.COMPLETED)
        return RunResult(
            success=True,
            execution_id=execution.id,
            status=ExecutionStatus.COMPLETED,
            nodes_processed=processed,
        )

    async def _fail(
        self,
        flow: Flow,
        execution: ExecutionRecord,
        processed: int,
        error: str,
    ) -> RunResult:
        await self._recorder.finish(execution.id, flow.id, ExecutionStatus.FAILED, error)
        return self._failed(execution.id, processed, error)

    def _failed(self, execution_id: str, processed: int, error: str) -> RunResult:
        return RunResult(
            success=False,
            execution_id=execution_id,
            status=ExecutionStatus.FAILED,
            nodes_processed=processed,
            error=error,
        )

    def _find_trigger(self, flow: Flow) -> Node:
        triggers = flow.trigger_nodes()
        if not triggers:
            raise ConfigurationError("Flow has no trigger node", flow_id=flow.id)
        if len(triggers) > 1:
            raise ConfigurationError(
                f"Flow has {len(triggers)} trigger nodes; exactly one is required",
                flow_id=flow.id,
            )
        return triggers[0]
