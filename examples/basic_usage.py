#!/usr/bin/env python3
"""Programmatic workflow definition example.

This demonstrates using the workflow model directly:

* assemble a draft (writer -> judges -> publisher, with a retry path)
* publish it and print the WorkflowPublished event
* score one round of votes and route on the outcome
* render a prompt template against an execution context

The tenant is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from multi_llm_orchestrator.config import EngineSettings
from multi_llm_orchestrator.domain.consensus import Ballot, Voter
from multi_llm_orchestrator.domain.errors import DomainError
from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.execution.context import ExecutionContext
from multi_llm_orchestrator.logging import configure_logging
from multi_llm_orchestrator.workflow.nodes import AgentNode, VoteNode
from multi_llm_orchestrator.workflow.workflow import Workflow


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Define and publish a review workflow.")
    parser.add_argument("--tenant", default="demo", help="Tenant owning the workflow")
    parser.add_argument("--topic", default="vector databases", help="Topic for the writer")
    parser.add_argument(
        "--scores",
        default="15,14,10,16,9",
        help='Comma-separated judge scores (0-20), e.g. "15,14,10"',
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level, settings.log_format)

    judge = Voter(provider="anthropic:claude-3-5-sonnet", role="critic")
    votes = VoteNode(
        id=NodeId("judges"),
        voters=(judge,),
        on_fail=NodeId("rewrite"),
        quorum_pct=60,
        min_score_per_vote=12,
        next_nodes=(NodeId("publish"),),
    )

    try:
        workflow = (
            Workflow.define(args.tenant, "write-and-review")
            .with_node(
                AgentNode(
                    id=NodeId("draft"),
                    role="writer",
                    provider="openai:gpt-4o",
                    system_prompt="Write a short article about {{user.topic}}.",
                    next_nodes=(NodeId("judges"),),
                )
            )
            .with_node(votes)
            .with_node(AgentNode(id=NodeId("rewrite"), provider="mistral:large"))
            .with_node(AgentNode(id=NodeId("publish"), provider="ollama:llama3"))
            .with_entry_node(NodeId("draft"))
        )
        result = workflow.publish(correlation_id="example-run")
    except DomainError as exc:
        print(f"{exc.error_code}: {exc.message}")
        return 1

    print(json.dumps(result.event.to_json(), indent=2))

    scores = [float(s) for s in args.scores.split(",") if s.strip()]
    outcome = votes.evaluate([Ballot(voter=judge, score=s) for s in scores])
    route = ", ".join(n.value for n in votes.route(outcome))
    print(f"Consensus achieved: {outcome.achieved} -> next: {route}")

    context = ExecutionContext.initial({"topic": args.topic}, correlation_id="example-run")
    print(context.render_template(workflow.nodes[NodeId("draft")].system_prompt))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
