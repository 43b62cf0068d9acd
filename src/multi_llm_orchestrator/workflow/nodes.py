"""Workflow node types.

The hierarchy is closed: exactly six kinds exist (agent, fanout, reduce, veto,
vote, loop) and :data:`Node` is their union, so consumers can ``match`` over
it exhaustively. Keyword construction is the validating builder: structural
invariants are checked once in ``__post_init__`` and a constructed node is
always internally valid. Reference integrity against the owning workflow is
checked separately by ``validate_references``.

Nodes compare and hash by id only. Two nodes with the same id are the same
node even if their other fields differ.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, TypeAlias

from multi_llm_orchestrator.domain.consensus import (
    Ballot,
    ConsensusOutcome,
    ConsensusRule,
    ConsensusStrategy,
    Voter,
)
from multi_llm_orchestrator.domain.errors import DomainValidationError
from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.workflow.constraints import InputMapping, NodeConstraints, OutputSchema

PROVIDER_PATTERN = re.compile(r"^(openai|anthropic|mistral|ollama):.+$")


class NodeKind(str, Enum):
    AGENT = "agent"
    FANOUT = "fanout"
    REDUCE = "reduce"
    VETO = "veto"
    VOTE = "vote"
    LOOP = "loop"


def _node_ids(values: Iterable[NodeId] | None, label: str) -> tuple[NodeId, ...]:
    ids = tuple(values or ())
    for value in ids:
        if not isinstance(value, NodeId):
            raise DomainValidationError(f"{label} must contain NodeId values, got: {value!r}")
    return ids


def _check_provider(provider: object) -> None:
    if not isinstance(provider, str) or PROVIDER_PATTERN.match(provider) is None:
        raise DomainValidationError(f"Invalid provider format: {provider}")


@dataclass(frozen=True, kw_only=True, eq=False)
class BaseNode:
    kind: ClassVar[NodeKind]

    id: NodeId
    role: str = ""
    next_nodes: tuple[NodeId, ...] = ()

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(f"{cls.__name__}: the node hierarchy is closed")

    def __post_init__(self) -> None:
        if not isinstance(self.id, NodeId):
            raise DomainValidationError("Node id is required")
        object.__setattr__(self, "next_nodes", _node_ids(self.next_nodes, "nextNodes"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseNode):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def has_edge_to(self, target: NodeId) -> bool:
        return target in self.next_nodes

    def referenced_ids(self) -> tuple[NodeId, ...]:
        """Every node id this node points at, successors first."""

        return self.next_nodes

    def validate_references(self, all_node_ids: Set[NodeId]) -> None:
        """All next-node references must exist in the workflow."""

        for target in self.next_nodes:
            if target not in all_node_ids:
                raise DomainValidationError(
                    f"Node {self.id.value} references non-existent node: {target.value}"
                )


@dataclass(frozen=True, kw_only=True, eq=False)
class AgentNode(BaseNode):
    """A single LLM call."""

    kind: ClassVar[NodeKind] = NodeKind.AGENT

    provider: str
    system_prompt: str = ""
    constraints: NodeConstraints = field(default_factory=NodeConstraints.defaults)
    input_mapping: InputMapping = field(default_factory=InputMapping.passthrough)
    output_schema: OutputSchema = field(default_factory=OutputSchema.any)

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_provider(self.provider)


@dataclass(frozen=True, kw_only=True, eq=False)
class FanoutNode(BaseNode):
    """Launches its branches in parallel."""

    kind: ClassVar[NodeKind] = NodeKind.FANOUT

    branches: tuple[NodeId, ...]

    def __post_init__(self) -> None:
        super().__post_init__()
        branches = _node_ids(self.branches, "branches")
        if not branches:
            raise DomainValidationError("Fanout must have at least one branch")
        object.__setattr__(self, "branches", branches)

    def referenced_ids(self) -> tuple[NodeId, ...]:
        return self.next_nodes + self.branches

    def validate_references(self, all_node_ids: Set[NodeId]) -> None:
        super().validate_references(all_node_ids)
        for branch in self.branches:
            if branch not in all_node_ids:
                raise DomainValidationError(
                    f"Fanout {self.id.value} references non-existent branch: {branch.value}"
                )


@dataclass(frozen=True, kw_only=True, eq=False)
class ReduceNode(BaseNode):
    """Merges the outputs of several upstream nodes into one.

    ``provider`` is optional: deterministic merge strategies need no model.
    """

    kind: ClassVar[NodeKind] = NodeKind.REDUCE

    inputs: tuple[NodeId, ...]
    strategy: str = "concatenate"
    provider: str | None = None
    system_prompt: str = ""
    constraints: NodeConstraints = field(default_factory=NodeConstraints.defaults)

    def __post_init__(self) -> None:
        super().__post_init__()
        inputs = _node_ids(self.inputs, "inputs")
        if not inputs:
            raise DomainValidationError("Reduce must have at least one input")
        if self.provider is not None:
            _check_provider(self.provider)
        object.__setattr__(self, "inputs", inputs)

    def referenced_ids(self) -> tuple[NodeId, ...]:
        return self.next_nodes + self.inputs

    def validate_references(self, all_node_ids: Set[NodeId]) -> None:
        super().validate_references(all_node_ids)
        for source in self.inputs:
            if source not in all_node_ids:
                raise DomainValidationError(
                    f"Reduce {self.id.value} references non-existent input: {source.value}"
                )


@dataclass(frozen=True, kw_only=True, eq=False)
class VetoNode(BaseNode):
    """Quality gate: continues to ``next_nodes`` or diverts to ``on_fail``."""

    kind: ClassVar[NodeKind] = NodeKind.VETO

    rules: Mapping[str, object]
    on_fail: NodeId

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.rules:
            raise DomainValidationError("Veto must have at least one rule")
        if not isinstance(self.on_fail, NodeId):
            raise DomainValidationError("Veto must define an onFail node")
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def referenced_ids(self) -> tuple[NodeId, ...]:
        return self.next_nodes + (self.on_fail,)

    def validate_references(self, all_node_ids: Set[NodeId]) -> None:
        super().validate_references(all_node_ids)
        if self.on_fail not in all_node_ids:
            raise DomainValidationError(
                f"Veto {self.id.value} references non-existent onFail node: {self.on_fail.value}"
            )

    def route(self, passed: bool) -> tuple[NodeId, ...]:
        return self.next_nodes if passed else (self.on_fail,)


@dataclass(frozen=True, kw_only=True, eq=False)
class VoteNode(BaseNode):
    """Several judges score an output; a quorum decides whether it passes."""

    kind: ClassVar[NodeKind] = NodeKind.VOTE

    voters: tuple[Voter, ...]
    on_fail: NodeId
    ballot_prompt: str = ""
    quorum_pct: int = 60
    min_score_per_vote: float = 0
    min_global_average: float = 0
    strategy: ConsensusStrategy = ConsensusStrategy.MAJORITY_VOTING

    def __post_init__(self) -> None:
        super().__post_init__()
        voters = tuple(self.voters or ())
        if not voters:
            raise DomainValidationError("Vote must have at least one voter")
        if self.quorum_pct < 1 or self.quorum_pct > 100:
            raise DomainValidationError("Quorum must be between 1-100")
        if self.min_score_per_vote < 0 or self.min_score_per_vote > 20:
            raise DomainValidationError("Min score per vote must be between 0-20")
        if not isinstance(self.on_fail, NodeId):
            raise DomainValidationError("Vote must define an onFail node")
        object.__setattr__(self, "voters", voters)

    def referenced_ids(self) -> tuple[NodeId, ...]:
        return self.next_nodes + (self.on_fail,)

    def validate_references(self, all_node_ids: Set[NodeId]) -> None:
        super().validate_references(all_node_ids)
        if self.on_fail not in all_node_ids:
            raise DomainValidationError(
                f"Vote {self.id.value} references non-existent onFail node: {self.on_fail.value}"
            )

    def consensus_rule(self) -> ConsensusRule:
        return ConsensusRule(
            quorum_pct=self.quorum_pct,
            min_score_per_vote=self.min_score_per_vote,
            min_global_average=self.min_global_average,
            strategy=self.strategy,
        )

    def evaluate(self, ballots: Sequence[Ballot]) -> ConsensusOutcome:
        return self.consensus_rule().evaluate(ballots)

    def route(self, outcome: ConsensusOutcome) -> tuple[NodeId, ...]:
        return self.next_nodes if outcome.achieved else (self.on_fail,)


@dataclass(frozen=True, kw_only=True, eq=False)
class LoopNode(BaseNode):
    """Repeats its body up to ``max_iterations`` times."""

    kind: ClassVar[NodeKind] = NodeKind.LOOP

    body: tuple[Node, ...]
    max_iterations: int = 1

    def __post_init__(self) -> None:
        super().__post_init__()
        body = tuple(self.body or ())
        if not body:
            raise DomainValidationError("Loop must have at least one body node")
        if self.max_iterations < 1:
            raise DomainValidationError("Max iterations must be >= 1")
        for child in body:
            if not isinstance(child, BaseNode):
                raise DomainValidationError(f"Loop body must contain nodes, got: {child!r}")
        object.__setattr__(self, "body", body)


Node: TypeAlias = AgentNode | FanoutNode | ReduceNode | VetoNode | VoteNode | LoopNode

NODE_TYPES: Mapping[NodeKind, type[BaseNode]] = MappingProxyType(
    {
        NodeKind.AGENT: AgentNode,
        NodeKind.FANOUT: FanoutNode,
        NodeKind.REDUCE: ReduceNode,
        NodeKind.VETO: VetoNode,
        NodeKind.VOTE: VoteNode,
        NodeKind.LOOP: LoopNode,
    }
)
