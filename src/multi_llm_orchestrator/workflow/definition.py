"""JSON workflow documents.

Documents describe a workflow in its wire shape (camelCase keys, node kind as
the ``kind`` discriminator). Pydantic only checks the document's shape; every
domain invariant is still enforced by the node and workflow types when the
document is turned into a :class:`Workflow`, so errors keep their domain codes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal, assert_never

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from multi_llm_orchestrator.domain.consensus import ConsensusStrategy, Voter
from multi_llm_orchestrator.domain.events import DEFAULT_TENANT
from multi_llm_orchestrator.domain.ids import NodeId, WorkflowId
from multi_llm_orchestrator.workflow.constraints import InputMapping, NodeConstraints, OutputSchema
from multi_llm_orchestrator.workflow.nodes import (
    AgentNode,
    FanoutNode,
    LoopNode,
    Node,
    ReduceNode,
    VetoNode,
    VoteNode,
)
from multi_llm_orchestrator.workflow.workflow import Workflow


class _DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ConstraintsModel(_DocumentModel):
    max_tokens_out: int = 4000
    timeout_ms: int = 30000
    temperature: float = 1.0
    max_retries: int = 2
    min_quality_score: float = 0.0


class VoterModel(_DocumentModel):
    provider: str
    role: str


class _NodeModel(_DocumentModel):
    id: str
    role: str = ""
    next_nodes: list[str] = Field(default_factory=list)


class AgentNodeModel(_NodeModel):
    kind: Literal["agent"] = "agent"
    provider: str
    system_prompt: str = ""
    constraints: ConstraintsModel = Field(default_factory=ConstraintsModel)
    input_mapping: dict[str, str] = Field(default_factory=dict)
    output_schema: dict[str, str] = Field(default_factory=dict)


class FanoutNodeModel(_NodeModel):
    kind: Literal["fanout"] = "fanout"
    branches: list[str]


class ReduceNodeModel(_NodeModel):
    kind: Literal["reduce"] = "reduce"
    inputs: list[str]
    strategy: str = "concatenate"
    provider: str | None = None
    system_prompt: str = ""
    constraints: ConstraintsModel = Field(default_factory=ConstraintsModel)


class VetoNodeModel(_NodeModel):
    kind: Literal["veto"] = "veto"
    rules: dict[str, Any]
    on_fail: str


class VoteNodeModel(_NodeModel):
    kind: Literal["vote"] = "vote"
    voters: list[VoterModel]
    on_fail: str
    ballot_prompt: str = ""
    quorum_pct: int = 60
    min_score_per_vote: float = 0
    min_global_average: float = 0
    strategy: ConsensusStrategy = ConsensusStrategy.MAJORITY_VOTING


class LoopNodeModel(_NodeModel):
    kind: Literal["loop"] = "loop"
    body: list[NodeModel]
    max_iterations: int = 1


NodeModel = Annotated[
    AgentNodeModel
    | FanoutNodeModel
    | ReduceNodeModel
    | VetoNodeModel
    | VoteNodeModel
    | LoopNodeModel,
    Field(discriminator="kind"),
]

LoopNodeModel.model_rebuild()


def _ids(values: list[str]) -> tuple[NodeId, ...]:
    return tuple(NodeId(v) for v in values)


def _constraints(model: ConstraintsModel) -> NodeConstraints:
    return NodeConstraints(**model.model_dump())


def build_node(model: NodeModel) -> Node:
    """Turn a node document into a validated domain node."""

    common: dict[str, Any] = {
        "id": NodeId(model.id),
        "role": model.role,
        "next_nodes": _ids(model.next_nodes),
    }
    match model:
        case AgentNodeModel():
            return AgentNode(
                **common,
                provider=model.provider,
                system_prompt=model.system_prompt,
                constraints=_constraints(model.constraints),
                input_mapping=InputMapping.of(model.input_mapping),
                output_schema=OutputSchema.of(model.output_schema),
            )
        case FanoutNodeModel():
            return FanoutNode(**common, branches=_ids(model.branches))
        case ReduceNodeModel():
            return ReduceNode(
                **common,
                inputs=_ids(model.inputs),
                strategy=model.strategy,
                provider=model.provider,
                system_prompt=model.system_prompt,
                constraints=_constraints(model.constraints),
            )
        case VetoNodeModel():
            return VetoNode(**common, rules=model.rules, on_fail=NodeId(model.on_fail))
        case VoteNodeModel():
            return VoteNode(
                **common,
                voters=tuple(Voter(provider=v.provider, role=v.role) for v in model.voters),
                on_fail=NodeId(model.on_fail),
                ballot_prompt=model.ballot_prompt,
                quorum_pct=model.quorum_pct,
                min_score_per_vote=model.min_score_per_vote,
                min_global_average=model.min_global_average,
                strategy=model.strategy,
            )
        case LoopNodeModel():
            return LoopNode(
                **common,
                body=tuple(build_node(child) for child in model.body),
                max_iterations=model.max_iterations,
            )
        case _:
            assert_never(model)


def _constraints_model(constraints: NodeConstraints) -> ConstraintsModel:
    return ConstraintsModel(
        max_tokens_out=constraints.max_tokens_out,
        timeout_ms=constraints.timeout_ms,
        temperature=constraints.temperature,
        max_retries=constraints.max_retries,
        min_quality_score=constraints.min_quality_score,
    )


def node_to_model(node: Node) -> NodeModel:
    common: dict[str, Any] = {
        "id": node.id.value,
        "role": node.role,
        "next_nodes": [n.value for n in node.next_nodes],
    }
    match node:
        case AgentNode():
            return AgentNodeModel(
                **common,
                provider=node.provider,
                system_prompt=node.system_prompt,
                constraints=_constraints_model(node.constraints),
                input_mapping=dict(node.input_mapping.mappings),
                output_schema=dict(node.output_schema.fields),
            )
        case FanoutNode():
            return FanoutNodeModel(**common, branches=[b.value for b in node.branches])
        case ReduceNode():
            return ReduceNodeModel(
                **common,
                inputs=[i.value for i in node.inputs],
                strategy=node.strategy,
                provider=node.provider,
                system_prompt=node.system_prompt,
                constraints=_constraints_model(node.constraints),
            )
        case VetoNode():
            return VetoNodeModel(**common, rules=dict(node.rules), on_fail=node.on_fail.value)
        case VoteNode():
            return VoteNodeModel(
                **common,
                voters=[VoterModel(provider=v.provider, role=v.role) for v in node.voters],
                on_fail=node.on_fail.value,
                ballot_prompt=node.ballot_prompt,
                quorum_pct=node.quorum_pct,
                min_score_per_vote=node.min_score_per_vote,
                min_global_average=node.min_global_average,
                strategy=node.strategy,
            )
        case LoopNode():
            return LoopNodeModel(
                **common,
                body=[node_to_model(child) for child in node.body],
                max_iterations=node.max_iterations,
            )
        case _:
            assert_never(node)


class WorkflowDocument(_DocumentModel):
    """A complete workflow definition for one tenant."""

    name: str
    tenant_id: str | None = None
    id: str | None = None
    entry_node: str | None = None
    nodes: list[NodeModel] = Field(default_factory=list)

    def to_workflow(self, default_tenant: str = DEFAULT_TENANT) -> Workflow:
        """Assemble a DRAFT workflow node by node.

        Raises the same domain errors as calling ``with_node`` and
        ``with_entry_node`` directly (duplicate ids, unknown entry node).
        """

        tenant_id = self.tenant_id or default_tenant
        if self.id is None:
            workflow = Workflow.define(tenant_id, self.name)
        else:
            workflow = Workflow(id=WorkflowId.of(tenant_id, self.id), name=self.name)

        for node_model in self.nodes:
            workflow = workflow.with_node(build_node(node_model))
        if self.entry_node is not None:
            workflow = workflow.with_entry_node(NodeId(self.entry_node))
        return workflow

    @classmethod
    def from_workflow(cls, workflow: Workflow) -> WorkflowDocument:
        return cls(
            name=workflow.name,
            tenant_id=workflow.id.tenant_id,
            id=workflow.id.value,
            entry_node=workflow.entry_node.value if workflow.entry_node else None,
            nodes=[node_to_model(node) for node in workflow.nodes.values()],
        )


def load_document(path: Path) -> WorkflowDocument:
    """Read a workflow document from a JSON file."""

    raw = json.loads(path.read_text(encoding="utf-8"))
    return WorkflowDocument.model_validate(raw)
