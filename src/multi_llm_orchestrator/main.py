"""CLI entrypoint for the multi-LLM orchestrator.

Works on JSON workflow documents: validate them, publish them (printing the
resulting domain event), inspect their execution graph, render templates
against an execution context, or serve the REST API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path

from pydantic import ValidationError

from multi_llm_orchestrator import __version__
from multi_llm_orchestrator.config import EngineSettings
from multi_llm_orchestrator.domain.errors import DomainError
from multi_llm_orchestrator.execution.context import ExecutionContext
from multi_llm_orchestrator.logging import configure_logging
from multi_llm_orchestrator.server.models import GraphView
from multi_llm_orchestrator.workflow.definition import load_document
from multi_llm_orchestrator.workflow.workflow import Workflow

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 2
EXIT_DOMAIN_ERROR = 3


def _parse_vars(values: list[str] | None) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected key=value, got: {item!r}")
        parsed[key.strip()] = value
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multi-llm-orchestrator",
        description="Define, validate and publish multi-LLM workflows",
    )
    parser.add_argument(
        "--version", action="version", version=f"multi-llm-orchestrator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a workflow document")
    validate.add_argument("document", type=Path, help="Path to a JSON workflow document")

    publish = subparsers.add_parser(
        "publish", help="Validate and publish a workflow, printing the WorkflowPublished event"
    )
    publish.add_argument("document", type=Path, help="Path to a JSON workflow document")
    publish.add_argument(
        "--correlation-id",
        default=None,
        help="Correlation id for the event (a urn:uuid is generated when omitted)",
    )
    publish.add_argument("--causation-id", default=None, help="Id of the triggering event")

    graph = subparsers.add_parser(
        "graph", help="Print the execution graph (roots, leaves, topological order)"
    )
    graph.add_argument("document", type=Path, help="Path to a JSON workflow document")

    render = subparsers.add_parser(
        "render", help="Render a {{path}} template against user inputs"
    )
    render.add_argument("--template", required=True, help="Template text")
    render.add_argument(
        "--var",
        action="append",
        dest="variables",
        metavar="KEY=VALUE",
        help="User input, available as {{user.KEY}} (repeatable)",
    )

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    return parser


def _load_workflow(path: Path, settings: EngineSettings) -> Workflow:
    document = load_document(path)
    workflow = document.to_workflow(default_tenant=settings.default_tenant)
    logger.debug(
        "Workflow document loaded",
        extra={"path": str(path), "workflow_id": workflow.id.composite_key},
    )
    return workflow


def _run(args: argparse.Namespace, settings: EngineSettings) -> int:
    if args.command == "validate":
        workflow = _load_workflow(args.document, settings)
        workflow.validate()
        print(f"OK: {workflow.id.composite_key} ({len(workflow.nodes)} nodes)")
        return EXIT_OK

    if args.command == "publish":
        workflow = _load_workflow(args.document, settings)
        correlation_id = args.correlation_id or f"urn:uuid:{uuid.uuid4()}"
        result = workflow.publish(correlation_id, args.causation_id)
        print(json.dumps(result.event.to_json(), indent=2))
        return EXIT_OK

    if args.command == "graph":
        workflow = _load_workflow(args.document, settings)
        view = GraphView.of(workflow.to_execution_graph())
        print(view.model_dump_json(by_alias=True, indent=2))
        return EXIT_OK

    if args.command == "render":
        context = ExecutionContext.initial(_parse_vars(args.variables))
        print(context.render_template(args.template))
        return EXIT_OK

    if args.command == "serve":
        import uvicorn

        from multi_llm_orchestrator.server.app import create_app

        uvicorn.run(
            create_app(settings),
            host=args.host,
            port=args.port,
            log_config=None,
        )
        return EXIT_OK

    raise AssertionError(f"Unhandled command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_INPUT_ERROR

    configure_logging(settings.log_level, settings.log_format)

    try:
        return _run(args, settings)
    except DomainError as e:
        logger.info("Workflow rejected", extra={"error_code": e.error_code})
        print(f"{e.error_code}: {e.message}", file=sys.stderr)
        return EXIT_DOMAIN_ERROR
    except ValidationError as e:
        print("Invalid workflow document:", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_INPUT_ERROR
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
