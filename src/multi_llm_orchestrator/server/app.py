"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the workflow model: documents
are turned into drafts, validated, published and inspected. Every rule lives
in the domain types; failures surface as problem-details responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from multi_llm_orchestrator import __version__
from multi_llm_orchestrator.config import EngineSettings
from multi_llm_orchestrator.domain.errors import DomainError
from multi_llm_orchestrator.domain.ids import WorkflowId
from multi_llm_orchestrator.server.models import (
    GraphView,
    PublishRequest,
    PublishResponse,
    ValidationReport,
    WorkflowView,
)
from multi_llm_orchestrator.server.problems import (
    correlation_id_of,
    install_problem_handlers,
    new_correlation_id,
)
from multi_llm_orchestrator.server.workflow_store import WorkflowStore
from multi_llm_orchestrator.workflow.definition import WorkflowDocument
from multi_llm_orchestrator.workflow.workflow import PublishResult, Workflow

logger = logging.getLogger(__name__)


def create_app(
    settings: EngineSettings | None = None, store: WorkflowStore | None = None
) -> FastAPI:
    settings = settings or EngineSettings()
    store = store if store is not None else WorkflowStore()

    app = FastAPI(
        title="Multi-LLM Orchestrator",
        version=__version__,
        description="REST API for defining, validating and publishing multi-LLM workflows.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings and the store for request handlers and tests.
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.correlation_header],
    )

    @app.middleware("http")
    async def correlation_id(request: Request, call_next):  # type: ignore[no-untyped-def]
        cid = request.headers.get(settings.correlation_header) or new_correlation_id()
        request.state.correlation_id = cid
        response = await call_next(request)
        response.headers[settings.correlation_header] = cid
        return response

    install_problem_handlers(app)

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/v1/workflows", response_model=list[WorkflowView])
    def list_workflows(tenant: str | None = None) -> list[WorkflowView]:
        return [WorkflowView.of(w) for w in store.list(tenant_id=tenant)]

    @app.post("/api/v1/workflows", response_model=WorkflowView, status_code=201)
    def create_workflow(document: WorkflowDocument, request: Request) -> WorkflowView:
        workflow = store.add(document.to_workflow(default_tenant=settings.default_tenant))
        logger.info(
            "Workflow stored",
            extra={
                "workflow_id": workflow.id.composite_key,
                "node_count": len(workflow.nodes),
                "correlation_id": correlation_id_of(request),
            },
        )
        return WorkflowView.of(workflow)

    @app.get("/api/v1/workflows/{key}", response_model=WorkflowView)
    def get_workflow(key: str) -> WorkflowView:
        return WorkflowView.of(store.get(WorkflowId.parse_composite_key(key)))

    @app.post("/api/v1/workflows/{key}/validate", response_model=ValidationReport)
    def validate_workflow(key: str) -> ValidationReport:
        workflow = store.get(WorkflowId.parse_composite_key(key))
        try:
            workflow.validate()
        except DomainError as e:
            return ValidationReport(
                key=key, valid=False, error_code=e.error_code, message=e.message
            )
        return ValidationReport(key=key, valid=True)

    @app.post("/api/v1/workflows/{key}/publish", response_model=PublishResponse)
    def publish_workflow(
        key: str, request: Request, body: PublishRequest | None = None
    ) -> PublishResponse:
        cid = correlation_id_of(request)
        causation_id = body.causation_id if body is not None else None
        results: list[PublishResult] = []

        def _publish(current: Workflow) -> Workflow:
            result = current.publish(cid, causation_id)
            results.append(result)
            return result.workflow

        store.update(WorkflowId.parse_composite_key(key), _publish)
        result = results[0]
        return PublishResponse(workflow=WorkflowView.of(result.workflow), event=result.event.to_json())

    @app.post("/api/v1/workflows/{key}/deprecate", response_model=WorkflowView)
    def deprecate_workflow(key: str) -> WorkflowView:
        updated = store.update(WorkflowId.parse_composite_key(key), Workflow.deprecate)
        return WorkflowView.of(updated)

    @app.get("/api/v1/workflows/{key}/graph", response_model=GraphView)
    def workflow_graph(key: str) -> GraphView:
        workflow = store.get(WorkflowId.parse_composite_key(key))
        return GraphView.of(workflow.to_execution_graph())

    return app
