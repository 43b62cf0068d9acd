"""Test configuration and fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from multi_llm_orchestrator.config import EngineSettings
from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.workflow.nodes import AgentNode
from multi_llm_orchestrator.workflow.workflow import Workflow


def make_agent(node_id: str, *next_ids: str, provider: str = "openai:gpt-4o") -> AgentNode:
    return AgentNode(
        id=NodeId(node_id),
        role="writer",
        provider=provider,
        next_nodes=tuple(NodeId(n) for n in next_ids),
    )


@pytest.fixture
def linear_workflow() -> Workflow:
    """Provide a valid draft: a -> b -> c, entry a."""
    workflow = Workflow.define("acme", "linear")
    workflow = workflow.with_node(make_agent("a", "b"))
    workflow = workflow.with_node(make_agent("b", "c"))
    workflow = workflow.with_node(make_agent("c"))
    return workflow.with_entry_node(NodeId("a"))


@pytest.fixture
def document_payload() -> dict[str, Any]:
    """Provide a review workflow document in its wire (camelCase) shape."""
    return {
        "tenantId": "acme",
        "id": "review",
        "name": "Draft and review",
        "entryNode": "draft",
        "nodes": [
            {
                "kind": "agent",
                "id": "draft",
                "role": "writer",
                "provider": "openai:gpt-4o",
                "systemPrompt": "Write about {{user.topic}}",
                "inputMapping": {"topic": "{{user.topic}}"},
                "outputSchema": {"text": "string"},
                "nextNodes": ["judges"],
            },
            {
                "kind": "vote",
                "id": "judges",
                "voters": [
                    {"provider": "anthropic:claude", "role": "critic"},
                    {"provider": "mistral:large", "role": "editor"},
                ],
                "onFail": "draft-retry",
                "quorumPct": 60,
                "minScorePerVote": 12,
                "nextNodes": ["publish"],
            },
            {
                "kind": "agent",
                "id": "draft-retry",
                "provider": "ollama:llama3",
            },
            {
                "kind": "agent",
                "id": "publish",
                "provider": "openai:gpt-4o-mini",
            },
        ],
    }


@pytest.fixture
def document_file(tmp_path: Path, document_payload: dict[str, Any]) -> Path:
    path = tmp_path / "workflow.json"
    path.write_text(json.dumps(document_payload), encoding="utf-8")
    return path


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> EngineSettings:
    """Provide settings isolated from any local `.env`."""
    monkeypatch.delenv("ORCHESTRATOR_DEFAULT_TENANT", raising=False)
    monkeypatch.delenv("ORCHESTRATOR_CORRELATION_HEADER", raising=False)
    return EngineSettings(_env_file=tmp_path / "missing.env")


@pytest.fixture(name="make_agent")
def make_agent_fixture():  # type: ignore[no-untyped-def]
    """Provide the agent-node factory to tests."""
    return make_agent
