from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from multi_llm_orchestrator.domain.consensus import ConsensusStrategy
from multi_llm_orchestrator.domain.errors import DomainValidationError
from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.workflow.definition import WorkflowDocument, load_document
from multi_llm_orchestrator.workflow.nodes import AgentNode, LoopNode, VoteNode


def test_document_builds_draft_workflow(document_payload: dict[str, Any]) -> None:
    workflow = WorkflowDocument.model_validate(document_payload).to_workflow()

    assert workflow.id.composite_key == "acme:review"
    assert workflow.entry_node == NodeId("draft")
    assert list(workflow.nodes) == [
        NodeId("draft"),
        NodeId("judges"),
        NodeId("draft-retry"),
        NodeId("publish"),
    ]
    workflow.validate()


def test_node_fields_are_mapped(document_payload: dict[str, Any]) -> None:
    workflow = WorkflowDocument.model_validate(document_payload).to_workflow()

    draft = workflow.nodes[NodeId("draft")]
    assert isinstance(draft, AgentNode)
    assert draft.input_mapping.mappings == {"topic": "{{user.topic}}"}
    assert draft.output_schema.fields == {"text": "string"}

    judges = workflow.nodes[NodeId("judges")]
    assert isinstance(judges, VoteNode)
    assert judges.on_fail == NodeId("draft-retry")
    assert judges.min_score_per_vote == 12
    assert judges.strategy is ConsensusStrategy.MAJORITY_VOTING
    assert len(judges.voters) == 2


def test_missing_tenant_uses_default(document_payload: dict[str, Any]) -> None:
    del document_payload["tenantId"]
    workflow = WorkflowDocument.model_validate(document_payload).to_workflow(default_tenant="ops")
    assert workflow.id.tenant_id == "ops"


def test_unknown_kind_is_rejected(document_payload: dict[str, Any]) -> None:
    document_payload["nodes"][0]["kind"] = "webhook"
    with pytest.raises(ValidationError):
        WorkflowDocument.model_validate(document_payload)


def test_unknown_field_is_rejected(document_payload: dict[str, Any]) -> None:
    document_payload["nodes"][0]["colour"] = "blue"
    with pytest.raises(ValidationError):
        WorkflowDocument.model_validate(document_payload)


def test_domain_rules_still_apply(document_payload: dict[str, Any]) -> None:
    document_payload["nodes"][0]["provider"] = "gpt-4o"
    document = WorkflowDocument.model_validate(document_payload)
    with pytest.raises(DomainValidationError, match="Invalid provider format"):
        document.to_workflow()


def test_loop_body_is_built_recursively() -> None:
    document = WorkflowDocument.model_validate(
        {
            "tenantId": "acme",
            "name": "refine",
            "entryNode": "loop",
            "nodes": [
                {
                    "kind": "loop",
                    "id": "loop",
                    "maxIterations": 3,
                    "body": [{"kind": "agent", "id": "step", "provider": "ollama:llama3"}],
                }
            ],
        }
    )
    loop = document.to_workflow().nodes[NodeId("loop")]

    assert isinstance(loop, LoopNode)
    assert loop.max_iterations == 3
    assert isinstance(loop.body[0], AgentNode)


def test_from_workflow_round_trips(document_payload: dict[str, Any]) -> None:
    workflow = WorkflowDocument.model_validate(document_payload).to_workflow()
    dumped = WorkflowDocument.from_workflow(workflow).model_dump(by_alias=True, exclude_none=True)

    assert dumped["tenantId"] == "acme"
    assert dumped["entryNode"] == "draft"
    assert dumped["nodes"][1]["kind"] == "vote"
    assert dumped["nodes"][1]["onFail"] == "draft-retry"
    assert WorkflowDocument.model_validate(dumped).to_workflow().nodes == workflow.nodes


def test_load_document(document_file: Path) -> None:
    assert load_document(document_file).name == "Draft and review"
