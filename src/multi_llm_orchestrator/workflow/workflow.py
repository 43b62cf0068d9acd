"""Workflow aggregate root.

A workflow is assembled copy-on-write while in DRAFT: ``with_node`` and
``with_entry_node`` return new instances and never touch the receiver.
``publish`` validates the whole graph and yields a PUBLISHED copy together
with a :class:`WorkflowPublished` event. Once published the workflow no longer
accepts mutations.

Invariants enforced by ``validate``:
- at least one node, and an entry node
- every node reference resolves within the registry
- the ``next_nodes`` relation is acyclic
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from multi_llm_orchestrator.domain.errors import (
    CycleDetectedError,
    DomainValidationError,
    IllegalWorkflowStateError,
)
from multi_llm_orchestrator.domain.events import WorkflowPublished
from multi_llm_orchestrator.domain.ids import NodeId, WorkflowId
from multi_llm_orchestrator.workflow.cycles import find_cycle
from multi_llm_orchestrator.workflow.graph import ExecutionGraph
from multi_llm_orchestrator.workflow.nodes import Node

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"


class WorkflowStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    DEPRECATED = "deprecated"


ALLOWED_TRANSITIONS: dict[WorkflowStatus, set[WorkflowStatus]] = {
    WorkflowStatus.DRAFT: {WorkflowStatus.PUBLISHED},
    WorkflowStatus.PUBLISHED: {WorkflowStatus.DEPRECATED},
    WorkflowStatus.DEPRECATED: set(),
}


def transition(*, current: WorkflowStatus, to: WorkflowStatus) -> WorkflowStatus:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalWorkflowStateError(f"Illegal transition: {current.value} -> {to.value}")
    return to


@dataclass(frozen=True, slots=True)
class PublishResult:
    workflow: Workflow
    event: WorkflowPublished


@dataclass(frozen=True, slots=True, eq=False)
class Workflow:
    id: WorkflowId
    name: str
    schema_version: str = SCHEMA_VERSION
    entry_node: NodeId | None = None
    nodes: Mapping[NodeId, Node] = field(default_factory=dict)
    status: WorkflowStatus = WorkflowStatus.DRAFT
    aggregate_version: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Workflow):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def define(cls, tenant_id: str, name: str) -> Workflow:
        """Start a new DRAFT workflow with a freshly generated id."""

        logger.debug("Defining new workflow", extra={"workflow_name": name, "tenant_id": tenant_id})
        return cls(id=WorkflowId.generate(tenant_id), name=name)

    @classmethod
    def reconstitute(
        cls,
        *,
        id: WorkflowId,
        name: str,
        nodes: Mapping[NodeId, Node],
        entry_node: NodeId | None,
        status: WorkflowStatus,
        aggregate_version: int,
        schema_version: str = SCHEMA_VERSION,
    ) -> Workflow:
        """Rebuild a workflow from stored fields without re-running validation."""

        return cls(
            id=id,
            name=name,
            schema_version=schema_version,
            entry_node=entry_node,
            nodes=nodes,
            status=status,
            aggregate_version=aggregate_version,
        )

    def _copy(self, **changes: object) -> Workflow:
        fields: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "schema_version": self.schema_version,
            "entry_node": self.entry_node,
            "nodes": self.nodes,
            "status": self.status,
            "aggregate_version": self.aggregate_version,
        }
        fields.update(changes)
        return Workflow(**fields)  # type: ignore[arg-type]

    def _ensure_draft(self) -> None:
        if self.status is not WorkflowStatus.DRAFT:
            raise IllegalWorkflowStateError(f"Cannot modify {self.status.value} workflow")

    def with_node(self, node: Node) -> Workflow:
        """Return a copy with ``node`` registered. Node ids are unique."""

        self._ensure_draft()
        if node.id in self.nodes:
            raise DomainValidationError(f"Node already exists: {node.id.value}")

        updated = self._copy(nodes={**self.nodes, node.id: node})
        logger.debug(
            "Added node to workflow",
            extra={"workflow_id": self.id.composite_key, "node_id": node.id.value},
        )
        return updated

    def with_entry_node(self, entry_node: NodeId) -> Workflow:
        self._ensure_draft()
        if entry_node not in self.nodes:
            raise DomainValidationError(f"Entry node does not exist: {entry_node.value}")

        logger.debug(
            "Set entry node",
            extra={"workflow_id": self.id.composite_key, "node_id": entry_node.value},
        )
        return self._copy(entry_node=entry_node)

    def validate(self) -> None:
        """Check every consistency rule; the first failure is raised."""

        if not self.nodes:
            raise DomainValidationError("Workflow has no nodes")
        if self.entry_node is None:
            raise DomainValidationError("Entry node not defined")

        node_ids = frozenset(self.nodes)
        for node in self.nodes.values():
            node.validate_references(node_ids)

        cycle = find_cycle({node_id: node.next_nodes for node_id, node in self.nodes.items()})
        if cycle is not None:
            raise CycleDetectedError(cycle[0].value, [n.value for n in cycle])

        logger.debug("Workflow validated", extra={"workflow_id": self.id.composite_key})

    def publish(self, correlation_id: str, causation_id: str | None = None) -> PublishResult:
        self._ensure_draft()
        self.validate()

        published = self._copy(
            status=transition(current=self.status, to=WorkflowStatus.PUBLISHED),
            aggregate_version=self.aggregate_version + 1,
        )
        if causation_id is None:
            event = WorkflowPublished.create(self.id, correlation_id, published.aggregate_version)
        else:
            event = WorkflowPublished.create_from(
                self.id, correlation_id, causation_id, published.aggregate_version
            )

        logger.info(
            "Workflow published",
            extra={
                "workflow_id": self.id.composite_key,
                "aggregate_version": published.aggregate_version,
                "correlation_id": correlation_id,
            },
        )
        return PublishResult(workflow=published, event=event)

    def deprecate(self) -> Workflow:
        """Retire a published workflow. The aggregate version is unchanged."""

        status = transition(current=self.status, to=WorkflowStatus.DEPRECATED)
        logger.info("Workflow deprecated", extra={"workflow_id": self.id.composite_key})
        return self._copy(status=status)

    def get_node(self, node_id: NodeId) -> Node | None:
        return self.nodes.get(node_id)

    def to_execution_graph(self) -> ExecutionGraph:
        if self.entry_node is None:
            raise DomainValidationError("Entry node not defined")
        return ExecutionGraph.of(
            {node_id: node.next_nodes for node_id, node in self.nodes.items()},
            self.entry_node,
        )
