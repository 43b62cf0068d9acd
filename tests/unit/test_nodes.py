"""Unit tests for node construction invariants and reference checks."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from multi_llm_orchestrator.domain.consensus import Ballot, Voter
from multi_llm_orchestrator.domain.errors import DomainValidationError
from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.workflow.nodes import (
    AgentNode,
    BaseNode,
    FanoutNode,
    LoopNode,
    NodeKind,
    ReduceNode,
    VetoNode,
    VoteNode,
)

JUDGES = (Voter("anthropic:claude", "critic"), Voter("openai:gpt-4o", "editor"))


@pytest.mark.parametrize("provider", ["openai:gpt-4o", "anthropic:claude-3", "mistral:large", "ollama:llama3"])
def test_agent_accepts_known_providers(provider: str) -> None:
    node = AgentNode(id=NodeId("a"), provider=provider)
    assert node.kind is NodeKind.AGENT
    assert node.constraints.max_tokens_out == 4000


@pytest.mark.parametrize("provider", ["gpt-4o", "cohere:command", "openai:", ""])
def test_agent_rejects_bad_provider(provider: str) -> None:
    with pytest.raises(DomainValidationError, match="Invalid provider format"):
        AgentNode(id=NodeId("a"), provider=provider)


def test_nodes_are_equal_by_id(make_agent) -> None:  # type: ignore[no-untyped-def]
    first = make_agent("a", "b")
    second = make_agent("a", provider="ollama:llama3")

    assert first == second
    assert len({first, second}) == 1
    assert first != make_agent("b")


def test_nodes_are_immutable(make_agent) -> None:  # type: ignore[no-untyped-def]
    node = make_agent("a")
    with pytest.raises(FrozenInstanceError):
        node.role = "other"  # type: ignore[misc]


def test_has_edge_to(make_agent) -> None:  # type: ignore[no-untyped-def]
    node = make_agent("a", "b")
    assert node.has_edge_to(NodeId("b"))
    assert not node.has_edge_to(NodeId("c"))


def test_missing_next_node_reference(make_agent) -> None:  # type: ignore[no-untyped-def]
    node = make_agent("a", "ghost")
    with pytest.raises(DomainValidationError, match="Node a references non-existent node: ghost"):
        node.validate_references({NodeId("a")})


def test_fanout_requires_branches() -> None:
    with pytest.raises(DomainValidationError, match="at least one branch"):
        FanoutNode(id=NodeId("fan"), branches=())


def test_fanout_missing_branch_reference() -> None:
    node = FanoutNode(id=NodeId("fan"), branches=(NodeId("branch"), NodeId("ghost")))
    with pytest.raises(DomainValidationError, match="references non-existent branch: ghost"):
        node.validate_references({NodeId("fan"), NodeId("branch")})


def test_fanout_referenced_ids() -> None:
    node = FanoutNode(id=NodeId("fan"), branches=(NodeId("x"),), next_nodes=(NodeId("y"),))
    assert node.referenced_ids() == (NodeId("y"), NodeId("x"))


def test_reduce_requires_inputs() -> None:
    with pytest.raises(DomainValidationError, match="at least one input"):
        ReduceNode(id=NodeId("merge"), inputs=())


def test_reduce_provider_is_optional_but_checked() -> None:
    node = ReduceNode(id=NodeId("merge"), inputs=(NodeId("a"),))
    assert node.provider is None
    assert node.strategy == "concatenate"
    with pytest.raises(DomainValidationError):
        ReduceNode(id=NodeId("merge"), inputs=(NodeId("a"),), provider="nope")


def test_reduce_missing_input_reference() -> None:
    node = ReduceNode(id=NodeId("merge"), inputs=(NodeId("a"), NodeId("ghost")))
    with pytest.raises(DomainValidationError, match="non-existent input: ghost"):
        node.validate_references({NodeId("merge"), NodeId("a")})


def test_veto_requires_rules() -> None:
    with pytest.raises(DomainValidationError, match="at least one rule"):
        VetoNode(id=NodeId("gate"), rules={}, on_fail=NodeId("fix"))


def test_veto_routing() -> None:
    gate = VetoNode(
        id=NodeId("gate"),
        rules={"minScore": 7},
        on_fail=NodeId("fix"),
        next_nodes=(NodeId("ship"),),
    )
    assert gate.route(True) == (NodeId("ship"),)
    assert gate.route(False) == (NodeId("fix"),)
    with pytest.raises(DomainValidationError, match="onFail node: fix"):
        gate.validate_references({NodeId("gate"), NodeId("ship")})


def test_vote_requires_voters() -> None:
    with pytest.raises(DomainValidationError, match="at least one voter"):
        VoteNode(id=NodeId("vote"), voters=(), on_fail=NodeId("retry"))


@pytest.mark.parametrize("quorum", [0, 101])
def test_vote_quorum_bounds(quorum: int) -> None:
    with pytest.raises(DomainValidationError, match="Quorum must be between 1-100"):
        VoteNode(id=NodeId("vote"), voters=JUDGES, on_fail=NodeId("retry"), quorum_pct=quorum)


def test_vote_min_score_bounds() -> None:
    with pytest.raises(DomainValidationError, match="Min score per vote"):
        VoteNode(id=NodeId("vote"), voters=JUDGES, on_fail=NodeId("retry"), min_score_per_vote=25)


def test_vote_routes_on_outcome() -> None:
    vote = VoteNode(
        id=NodeId("vote"),
        voters=JUDGES,
        on_fail=NodeId("retry"),
        min_score_per_vote=12,
        next_nodes=(NodeId("ship"),),
    )
    passed = vote.evaluate([Ballot(JUDGES[0], 15), Ballot(JUDGES[1], 14)])
    failed = vote.evaluate([Ballot(JUDGES[0], 15), Ballot(JUDGES[1], 3)])

    assert vote.route(passed) == (NodeId("ship"),)
    assert vote.route(failed) == (NodeId("retry"),)


def test_loop_invariants(make_agent) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(DomainValidationError, match="at least one body node"):
        LoopNode(id=NodeId("loop"), body=())
    with pytest.raises(DomainValidationError, match="Max iterations must be >= 1"):
        LoopNode(id=NodeId("loop"), body=(make_agent("step"),), max_iterations=0)

    loop = LoopNode(id=NodeId("loop"), body=(make_agent("step"),), max_iterations=3)
    assert loop.kind is NodeKind.LOOP


def test_node_hierarchy_is_closed() -> None:
    with pytest.raises(TypeError, match="closed"):

        class CustomNode(BaseNode):  # noqa: F841
            pass
