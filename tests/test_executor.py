"""
Tests for FlowExecutor.

Covers:
- Customer/lead branching scenario end to end
- Delay pause and resume from the node after the delay
- Tag idempotence through a running flow
- Configuration errors (missing flow, zero triggers) create no execution
- Cyclic graphs stop at the step budget
- Inactive flows are a no-op
- Handler failures keep the partial log and update counters
- The step budget spans resumes
- Entity store failures end the execution instead of leaving it running
"""

import pytest

from flow_engine.collaborators import SqlEntityStore
from flow_engine.core.exceptions import (
    ConfigurationError,
    ExecutionNotFoundError,
    ExecutionNotResumableError,
)
from flow_engine.db.models import ContactModel
from flow_engine.engine.executor import FlowExecutor
from flow_engine.engine.types import ExecutionStatus, LogStatus

from .builders import edge, flow, node, vip_flow
from .conftest import FakeMessaging


async def log_of(execution_repo, execution_id):
    record = await execution_repo.get(execution_id)
    return [(entry.type, entry.detail) for entry in record.execution_log]


def delay_flow(duration=5, unit="minutes"):
    return flow(
        nodes=[
            node("trigger-1", "trigger"),
            node("delay-1", "delay", duration=duration, unit=unit),
            node("message-1", "message", channel="whatsapp", customMessage="Hi {{name}}"),
            node("end-1", "end"),
        ],
        edges=[
            edge("trigger-1", "delay-1"),
            edge("delay-1", "message-1"),
            edge("message-1", "end-1"),
        ],
    )


# ---------------------------------------------------------------------------
# Branching scenario
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_customer_takes_true_branch(executor, store_flow, add_contact, entity_store, execution_repo, flow_repo):
    await add_contact("A", full_name="Ana", lifecycle_stage="CUSTOMER", phone="+15550100")
    stored = await store_flow(vip_flow())

    result = await executor.execute(stored.id, "A", "manual")

    assert result.success is True
    assert result.status == ExecutionStatus.COMPLETED
    assert result.nodes_processed == 4
    assert await log_of(execution_repo, result.execution_id) == [
        ("trigger", "Trigger activated: manual"),
        ("condition", "Condition: lifecycle_stage equals CUSTOMER = true"),
        ("tag", "Tag add: vip"),
        ("end", "Flow ended"),
    ]
    assert "vip" in (await entity_store.read_snapshot("A")).tags

    counted = await flow_repo.get(stored.id)
    assert counted.total_executions == 1
    assert counted.successful_executions == 1


@pytest.mark.asyncio
async def test_lead_takes_false_branch(executor, store_flow, add_contact, entity_store, execution_repo, messaging):
    await add_contact("B", full_name="Sam", lifecycle_stage="LEAD", phone="+15550101", tags=["trial"])
    stored = await store_flow(vip_flow())

    result = await executor.execute(stored.id, "B", "manual")

    assert result.status == ExecutionStatus.COMPLETED
    assert await log_of(execution_repo, result.execution_id) == [
        ("trigger", "Trigger activated: manual"),
        ("condition", "Condition: lifecycle_stage equals CUSTOMER = false"),
        ("message", "Sent whatsapp message"),
        ("end", "Flow ended"),
    ]
    assert messaging.sent == [("whatsapp", "+15550101", "Welcome")]
    assert (await entity_store.read_snapshot("B")).tags == {"trial"}


@pytest.mark.asyncio
async def test_unknown_entity_runs_with_empty_snapshot(executor, store_flow, execution_repo, messaging):
    stored = await store_flow(vip_flow())

    result = await executor.execute(stored.id, "ghost", "manual")

    assert result.status == ExecutionStatus.COMPLETED
    log = await log_of(execution_repo, result.execution_id)
    assert log[2][0] == "message"
    assert log[2][1].startswith("Channel unavailable")
    assert messaging.sent == []


# ---------------------------------------------------------------------------
# Delay and resume
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delay_pauses_on_the_following_node(executor, store_flow, add_contact, execution_repo, flow_repo):
    await add_contact("A", full_name="Ana", phone="+15550100")
    stored = await store_flow(delay_flow())

    result = await executor.execute(stored.id, "A", "manual")

    assert result.success is True
    assert result.status == ExecutionStatus.PAUSED
    assert result.nodes_processed == 2
    assert result.message == "Delay: 5 minutes"

    record = await execution_repo.get(result.execution_id)
    assert record.status == ExecutionStatus.PAUSED
    assert record.current_node_id == "message-1"
    assert record.resume_after is not None
    assert record.completed_at is None
    assert (await flow_repo.get(stored.id)).total_executions == 0


@pytest.mark.asyncio
async def test_resume_continues_from_stored_node(executor, store_flow, add_contact, execution_repo, messaging):
    await add_contact("A", full_name="Ana", phone="+15550100")
    stored = await store_flow(delay_flow())
    paused = await executor.execute(stored.id, "A", "manual")

    result = await executor.resume(paused.execution_id)

    assert result.status == ExecutionStatus.COMPLETED
    assert result.execution_id == paused.execution_id
    assert result.nodes_processed == 2
    assert [t for t, _ in await log_of(execution_repo, paused.execution_id)] == [
        "trigger",
        "delay",
        "message",
        "end",
    ]
    assert messaging.sent == [("whatsapp", "+15550100", "Hi Ana")]


@pytest.mark.asyncio
async def test_resume_takes_a_fresh_snapshot(executor, store_flow, add_contact, session, entity_store):
    await add_contact("A", lifecycle_stage="LEAD")
    stored = await store_flow(
        flow(
            nodes=[
                node("trigger-1", "trigger"),
                node("delay-1", "delay", duration=1, unit="days"),
                node("condition-1", "condition", field="lifecycle_stage", value="CUSTOMER"),
                node("tag-1", "tag", action="add", tagName="vip"),
                node("end-1", "end"),
            ],
            edges=[
                edge("trigger-1", "delay-1"),
                edge("delay-1", "condition-1"),
                edge("condition-1", "tag-1", "true"),
                edge("condition-1", "end-1", "false"),
                edge("tag-1", "end-1"),
            ],
        )
    )
    paused = await executor.execute(stored.id, "A", "manual")

    contact = await session.get(ContactModel, "A")
    contact.lifecycle_stage = "CUSTOMER"
    await session.commit()

    result = await executor.resume(paused.execution_id)

    assert result.status == ExecutionStatus.COMPLETED
    assert "vip" in (await entity_store.read_snapshot("A")).tags


@pytest.mark.asyncio
async def test_zero_delay_does_not_pause(executor, store_flow, add_contact):
    await add_contact("A", phone="+15550100")
    stored = await store_flow(delay_flow(duration=0))

    result = await executor.execute(stored.id, "A", "manual")

    assert result.status == ExecutionStatus.COMPLETED
    assert result.nodes_processed == 4


@pytest.mark.asyncio
async def test_resume_rejects_finished_execution(executor, store_flow):
    stored = await store_flow(vip_flow())
    done = await executor.execute(stored.id, "ghost", "manual")

    with pytest.raises(ExecutionNotResumableError):
        await executor.resume(done.execution_id)


@pytest.mark.asyncio
async def test_resume_unknown_execution(executor):
    with pytest.raises(ExecutionNotFoundError):
        await executor.resume("exec_missing")


@pytest.mark.asyncio
async def test_deactivated_flow_still_resumes(executor, store_flow, add_contact, flow_repo):
    await add_contact("A", phone="+15550100")
    stored = await store_flow(delay_flow())
    paused = await executor.execute(stored.id, "A", "manual")

    await flow_repo.set_active(stored.id, False)
    result = await executor.resume(paused.execution_id)

    assert result.status == ExecutionStatus.COMPLETED


@pytest.mark.asyncio
async def test_resume_after_flow_deleted_fails(executor, store_flow, flow_repo, execution_repo):
    stored = await store_flow(delay_flow())
    paused = await executor.execute(stored.id, "ghost", "manual")

    await flow_repo.delete(stored.id)
    result = await executor.resume(paused.execution_id)

    assert result.success is False
    assert result.status == ExecutionStatus.FAILED
    record = await execution_repo.get(paused.execution_id)
    assert record.status == ExecutionStatus.FAILED
    assert record.error_message == f"Flow not found: {stored.id}"


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_adding_same_tag_twice_stores_it_once(executor, store_flow, add_contact, session):
    await add_contact("A")
    stored = await store_flow(
        flow(
            nodes=[
                node("trigger-1", "trigger"),
                node("tag-1", "tag", action="add", tagName="vip"),
                node("tag-2", "tag", action="add", tagName="vip"),
                node("end-1", "end"),
            ],
            edges=[edge("trigger-1", "tag-1"), edge("tag-1", "tag-2"), edge("tag-2", "end-1")],
        )
    )

    result = await executor.execute(stored.id, "A", "manual")

    assert result.status == ExecutionStatus.COMPLETED
    contact = await session.get(ContactModel, "A", populate_existing=True)
    assert contact.tags.count("vip") == 1


@pytest.mark.asyncio
async def test_tag_on_missing_entity_fails(executor, store_flow, execution_repo):
    stored = await store_flow(
        flow(
            nodes=[
                node("trigger-1", "trigger"),
                node("tag-1", "tag", action="add", tagName="vip"),
                node("end-1", "end"),
            ],
            edges=[edge("trigger-1", "tag-1"), edge("tag-1", "end-1")],
        )
    )

    result = await executor.execute(stored.id, "ghost", "manual")

    assert result.status == ExecutionStatus.FAILED
    assert result.error == "Entity not found: ghost"


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_flow_raises(executor, execution_repo):
    with pytest.raises(ConfigurationError):
        await executor.execute("flow_missing", "A", "manual")
    assert await execution_repo.list() == []


@pytest.mark.asyncio
async def test_zero_triggers_raises_without_execution(executor, store_flow, execution_repo):
    stored = await store_flow(
        flow(
            nodes=[node("message-1", "message", channel="sms"), node("end-1", "end")],
            edges=[edge("message-1", "end-1")],
        )
    )

    with pytest.raises(ConfigurationError):
        await executor.execute(stored.id, "A", "manual")

    assert await execution_repo.list() == []


@pytest.mark.asyncio
async def test_fan_out_fails_the_run(executor, store_flow):
    stored = await store_flow(
        flow(
            nodes=[node("trigger-1", "trigger"), node("end-1", "end"), node("end-2", "end")],
            edges=[edge("trigger-1", "end-1"), edge("trigger-1", "end-2")],
        )
    )

    result = await executor.execute(stored.id, "A", "manual")

    assert result.status == ExecutionStatus.FAILED
    assert "outgoing edges" in result.error


# ---------------------------------------------------------------------------
# Step budget and failures
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_cycle_fails_at_step_budget(executor, store_flow, execution_repo, flow_repo):
    stored = await store_flow(
        flow(
            nodes=[
                node("trigger-1", "trigger"),
                node("delay-1", "delay", duration=0),
                node("delay-2", "delay", duration=0),
            ],
            edges=[
                edge("trigger-1", "delay-1"),
                edge("delay-1", "delay-2"),
                edge("delay-2", "delay-1"),
            ],
        )
    )

    result = await executor.execute(stored.id, "A", "manual")

    assert result.success is False
    assert result.status == ExecutionStatus.FAILED
    assert result.error == "execution exceeded max steps"
    assert result.nodes_processed == 50

    record = await execution_repo.get(result.execution_id)
    assert record.error_message == "execution exceeded max steps"
    assert record.completed_at is not None
    assert len(record.execution_log) == 50

    counted = await flow_repo.get(stored.id)
    assert counted.total_executions == 1
    assert counted.successful_executions == 0


@pytest.mark.asyncio
async def test_handler_error_keeps_partial_log(executor, store_flow, execution_repo, flow_repo):
    stored = await store_flow(
        flow(
            nodes=[
                node("trigger-1", "trigger"),
                node("condition-1", "condition", value="CUSTOMER"),
                node("end-1", "end"),
                node("end-2", "end"),
            ],
            edges=[
                edge("trigger-1", "condition-1"),
                edge("condition-1", "end-1", "true"),
                edge("condition-1", "end-2", "false"),
            ],
        )
    )

    result = await executor.execute(stored.id, "A", "manual")

    assert result.status == ExecutionStatus.FAILED
    assert 'Missing required config "field"' in result.error

    record = await execution_repo.get(result.execution_id)
    assert [(e.node_id, e.status) for e in record.execution_log] == [
        ("trigger-1", LogStatus.SUCCESS),
        ("condition-1", LogStatus.ERROR),
    ]
    assert record.current_node_id == "condition-1"

    counted = await flow_repo.get(stored.id)
    assert counted.total_executions == 1
    assert counted.successful_executions == 0


@pytest.mark.asyncio
async def test_strict_delivery_fails_on_network_error(
    flow_repo, execution_repo, entity_store, webhook, store_flow, add_contact
):
    await add_contact("B", lifecycle_stage="LEAD", phone="+15550101")
    strict = FlowExecutor(
        flow_repo,
        execution_repo,
        entity_store,
        FakeMessaging(fail=True),
        webhook,
        strict_delivery=True,
    )
    stored = await store_flow(vip_flow())

    result = await strict.execute(stored.id, "B", "manual")

    assert result.status == ExecutionStatus.FAILED
    assert "provider unreachable" in result.error


@pytest.mark.asyncio
async def test_step_budget_spans_resumes(flow_repo, execution_repo, entity_store, messaging, webhook, store_flow):
    small = FlowExecutor(flow_repo, execution_repo, entity_store, messaging, webhook, max_steps=3)
    stored = await store_flow(
        flow(
            nodes=[
                node("trigger-1", "trigger"),
                node("delay-1", "delay", duration=1, unit="minutes"),
                node("webhook-1", "webhook"),
                node("webhook-2", "webhook"),
                node("end-1", "end"),
            ],
            edges=[
                edge("trigger-1", "delay-1"),
                edge("delay-1", "webhook-1"),
                edge("webhook-1", "webhook-2"),
                edge("webhook-2", "end-1"),
            ],
        )
    )

    paused = await small.execute(stored.id, "A", "manual")
    assert paused.status == ExecutionStatus.PAUSED

    result = await small.resume(paused.execution_id)

    assert result.status == ExecutionStatus.FAILED
    assert result.error == "execution exceeded max steps"
    assert result.nodes_processed == 1


class UnreachableStore(SqlEntityStore):
    """Entity store whose reads always fail."""

    async def read_snapshot(self, entity_id):
        raise RuntimeError("entity store unreachable")


@pytest.mark.asyncio
async def test_snapshot_failure_fails_the_execution(
    flow_repo, execution_repo, session, messaging, webhook, store_flow
):
    broken = FlowExecutor(flow_repo, execution_repo, UnreachableStore(session), messaging, webhook)
    stored = await store_flow(vip_flow())

    result = await broken.execute(stored.id, "A", "manual")

    assert result.success is False
    assert result.status == ExecutionStatus.FAILED
    assert result.error == "entity store unreachable"
    assert result.nodes_processed == 0

    record = await execution_repo.get(result.execution_id)
    assert record.status == ExecutionStatus.FAILED
    assert record.error_message == "entity store unreachable"
    assert record.completed_at is not None

    counted = await flow_repo.get(stored.id)
    assert counted.total_executions == 1
    assert counted.successful_executions == 0


@pytest.mark.asyncio
async def test_snapshot_failure_on_resume_does_not_leave_execution_running(
    executor, flow_repo, execution_repo, session, messaging, webhook, store_flow
):
    stored = await store_flow(delay_flow())
    paused = await executor.execute(stored.id, "A", "manual")
    broken = FlowExecutor(flow_repo, execution_repo, UnreachableStore(session), messaging, webhook)

    result = await broken.resume(paused.execution_id)

    assert result.status == ExecutionStatus.FAILED
    assert result.error == "entity store unreachable"

    record = await execution_repo.get(paused.execution_id)
    assert record.status == ExecutionStatus.FAILED
    assert record.completed_at is not None
    assert messaging.sent == []


# ---------------------------------------------------------------------------
# Inactive flows
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_inactive_flow_is_a_noop(executor, store_flow, execution_repo):
    stored = await store_flow(vip_flow(active=False))

    result = await executor.execute(stored.id, "A", "manual")

    assert result.success is False
    assert result.execution_id is None
    assert "not active" in result.message
    assert await execution_repo.list() == []
