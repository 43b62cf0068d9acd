from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from multi_llm_orchestrator.domain.events import (
    ConsensusAchieved,
    DomainEvent,
    ExecutionStarted,
    NodeExecuted,
    WorkflowPublished,
)
from multi_llm_orchestrator.domain.ids import ConsensusSessionId, ExecutionId, NodeId, WorkflowId


def test_workflow_published_identity() -> None:
    event = WorkflowPublished.create(WorkflowId.of("acme", "review"), "corr-1", 1)

    assert event.aggregate_id == "acme:review"
    assert event.tenant_id == "acme"
    assert event.causation_id is None
    assert event.event_id
    assert event.occurred_at.tzinfo is not None


def test_workflow_published_wire_shape() -> None:
    event = WorkflowPublished.create_from(WorkflowId.of("acme", "review"), "corr-1", "evt-0", 3)
    payload = event.to_json()

    assert payload["eventType"] == "WorkflowPublished"
    assert payload["aggregateType"] == "Workflow"
    assert payload["aggregateId"] == "acme:review"
    assert payload["tenantId"] == "acme"
    assert payload["workflowId"] == "review"
    assert payload["correlationId"] == "corr-1"
    assert payload["causationId"] == "evt-0"
    assert payload["aggregateVersion"] == 3
    assert payload["eventVersion"] == 1


def test_causation_id_is_always_present_on_the_wire() -> None:
    payload = ExecutionStarted.create(ExecutionId("run-1"), "corr-1", 1).to_json()
    assert "causationId" in payload
    assert payload["causationId"] is None
    assert payload["tenantId"] == "default"


def test_node_executed_payload() -> None:
    payload = NodeExecuted.create(ExecutionId("run-1"), NodeId("draft"), "corr-1", 2).to_json()
    assert payload["aggregateId"] == "run-1"
    assert payload["nodeId"] == "draft"
    assert payload["aggregateType"] == "Execution"


def test_consensus_achieved_payload() -> None:
    payload = ConsensusAchieved.create(ConsensusSessionId("s-1"), "corr-1", 1).to_json()
    assert payload["aggregateType"] == "ConsensusSession"
    assert payload["sessionId"] == "s-1"


def test_events_are_immutable() -> None:
    event = ExecutionStarted.create(ExecutionId("run-1"), "corr-1", 1)
    with pytest.raises(FrozenInstanceError):
        event.correlation_id = "other"  # type: ignore[misc]


def test_base_event_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        DomainEvent(correlation_id="c", aggregate_version=1)  # type: ignore[abstract]
