"""Domain event records.

These records are the stable contract between the model and any message bus.
The wire names produced by :meth:`DomainEvent.to_json` must not change, and
``causationId`` is always present (``null`` when there is no cause).
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar

from .ids import ConsensusSessionId, ExecutionId, NodeId, WorkflowId

DEFAULT_TENANT = "default"


def _new_event_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainEvent(ABC):
    """Metadata common to every event."""

    event_type: ClassVar[str] = "DomainEvent"
    aggregate_type: ClassVar[str] = ""
    event_version: ClassVar[int] = 1

    correlation_id: str
    aggregate_version: int
    causation_id: str | None = None
    event_id: str = field(default_factory=_new_event_id)
    occurred_at: datetime = field(default_factory=_utc_now)

    @abstractmethod
    def _identity(self) -> tuple[str, str]:
        """Return ``(aggregate_id, tenant_id)``."""

    def _payload(self) -> dict[str, object]:
        return {}

    def to_json(self) -> dict[str, object]:
        aggregate_id, tenant_id = self._identity()
        out: dict[str, object] = {
            "eventId": self.event_id,
            "eventType": self.event_type,
            "aggregateId": aggregate_id,
            "aggregateType": self.aggregate_type,
            "eventVersion": self.event_version,
            "correlationId": self.correlation_id,
            "causationId": self.causation_id,
            "occurredAt": self.occurred_at.astimezone(UTC).isoformat(),
            "aggregateVersion": self.aggregate_version,
            "tenantId": tenant_id,
        }
        out.update(self._payload())
        return out


@dataclass(frozen=True, slots=True, kw_only=True)
class WorkflowPublished(DomainEvent):
    event_type: ClassVar[str] = "WorkflowPublished"
    aggregate_type: ClassVar[str] = "Workflow"

    workflow_id: WorkflowId

    @property
    def aggregate_id(self) -> str:
        return self.workflow_id.composite_key

    @property
    def tenant_id(self) -> str:
        return self.workflow_id.tenant_id

    def _identity(self) -> tuple[str, str]:
        return self.aggregate_id, self.tenant_id

    def _payload(self) -> dict[str, object]:
        return {"workflowId": self.workflow_id.value}

    @classmethod
    def create(
        cls, workflow_id: WorkflowId, correlation_id: str, aggregate_version: int
    ) -> WorkflowPublished:
        return cls(
            workflow_id=workflow_id,
            correlation_id=correlation_id,
            aggregate_version=aggregate_version,
        )

    @classmethod
    def create_from(
        cls,
        workflow_id: WorkflowId,
        correlation_id: str,
        causation_id: str,
        aggregate_version: int,
    ) -> WorkflowPublished:
        return cls(
            workflow_id=workflow_id,
            correlation_id=correlation_id,
            causation_id=causation_id,
            aggregate_version=aggregate_version,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ExecutionStarted(DomainEvent):
    event_type: ClassVar[str] = "ExecutionStarted"
    aggregate_type: ClassVar[str] = "Execution"

    execution_id: ExecutionId
    tenant_id: str = DEFAULT_TENANT

    @property
    def aggregate_id(self) -> str:
        return self.execution_id.value

    def _identity(self) -> tuple[str, str]:
        return self.aggregate_id, self.tenant_id

    def _payload(self) -> dict[str, object]:
        return {"executionId": self.execution_id.value}

    @classmethod
    def create(
        cls, execution_id: ExecutionId, correlation_id: str, aggregate_version: int
    ) -> ExecutionStarted:
        return cls(
            execution_id=execution_id,
            correlation_id=correlation_id,
            aggregate_version=aggregate_version,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class NodeExecuted(DomainEvent):
    event_type: ClassVar[str] = "NodeExecuted"
    aggregate_type: ClassVar[str] = "Execution"

    execution_id: ExecutionId
    node_id: NodeId
    tenant_id: str = DEFAULT_TENANT

    @property
    def aggregate_id(self) -> str:
        return self.execution_id.value

    def _identity(self) -> tuple[str, str]:
        return self.aggregate_id, self.tenant_id

    def _payload(self) -> dict[str, object]:
        return {"executionId": self.execution_id.value, "nodeId": self.node_id.value}

    @classmethod
    def create(
        cls,
        execution_id: ExecutionId,
        node_id: NodeId,
        correlation_id: str,
        aggregate_version: int,
    ) -> NodeExecuted:
        return cls(
            execution_id=execution_id,
            node_id=node_id,
            correlation_id=correlation_id,
            aggregate_version=aggregate_version,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ConsensusAchieved(DomainEvent):
    event_type: ClassVar[str] = "ConsensusAchieved"
    aggregate_type: ClassVar[str] = "ConsensusSession"

    session_id: ConsensusSessionId
    tenant_id: str = DEFAULT_TENANT

    @property
    def aggregate_id(self) -> str:
        return self.session_id.value

    def _identity(self) -> tuple[str, str]:
        return self.aggregate_id, self.tenant_id

    def _payload(self) -> dict[str, object]:
        return {"sessionId": self.session_id.value}

    @classmethod
    def create(
        cls, session_id: ConsensusSessionId, correlation_id: str, aggregate_version: int
    ) -> ConsensusAchieved:
        return cls(
            session_id=session_id,
            correlation_id=correlation_id,
            aggregate_version=aggregate_version,
        )
