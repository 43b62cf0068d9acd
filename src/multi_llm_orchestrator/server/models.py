"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from multi_llm_orchestrator.workflow.definition import WorkflowDocument
from multi_llm_orchestrator.workflow.graph import ExecutionGraph
from multi_llm_orchestrator.workflow.workflow import Workflow, WorkflowStatus


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkflowView(_ApiModel):
    key: str
    tenant_id: str
    id: str
    name: str
    schema_version: str
    status: WorkflowStatus
    aggregate_version: int
    entry_node: str | None = None
    definition: WorkflowDocument

    @classmethod
    def of(cls, workflow: Workflow) -> WorkflowView:
        return cls(
            key=workflow.id.composite_key,
            tenant_id=workflow.id.tenant_id,
            id=workflow.id.value,
            name=workflow.name,
            schema_version=workflow.schema_version,
            status=workflow.status,
            aggregate_version=workflow.aggregate_version,
            entry_node=workflow.entry_node.value if workflow.entry_node else None,
            definition=WorkflowDocument.from_workflow(workflow),
        )


class ValidationReport(_ApiModel):
    key: str
    valid: bool
    error_code: str | None = None
    message: str | None = None


class GraphView(_ApiModel):
    entry_node: str
    adjacency: dict[str, list[str]]
    roots: list[str]
    leaves: list[str]
    topological_order: list[str] = Field(default_factory=list)

    @classmethod
    def of(cls, graph: ExecutionGraph) -> GraphView:
        return cls(
            entry_node=graph.entry_node.value,
            adjacency={
                node.value: [target.value for target in successors]
                for node, successors in graph.adjacency.items()
            },
            roots=sorted(n.value for n in graph.root_nodes()),
            leaves=sorted(n.value for n in graph.leaf_nodes()),
            topological_order=[n.value for n in graph.topological_order()],
        )


class PublishRequest(_ApiModel):
    causation_id: str | None = None


class PublishResponse(_ApiModel):
    workflow: WorkflowView
    event: dict[str, Any]
