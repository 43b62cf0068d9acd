"""Problem-details (RFC 9457) error responses.

Every failure leaving the API is an ``application/problem+json`` body with the
domain ``errorCode``, the request's correlation id, a timestamp, the method
and the path. Domain messages are safe to expose; unexpected exceptions are
logged and reported without detail.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from multi_llm_orchestrator.domain.errors import (
    CycleDetectedError,
    DomainError,
    IllegalWorkflowStateError,
)
from multi_llm_orchestrator.server.workflow_store import WorkflowAlreadyStored, WorkflowNotFound

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"
MAX_DETAIL_LENGTH = 512


class ProblemType(str, Enum):
    VALIDATION = "urn:problem:validation-error"
    WORKFLOW_CYCLE = "urn:problem:workflow-cycle"
    BAD_REQUEST = "urn:problem:bad-request"
    NOT_FOUND = "urn:problem:not-found"
    CONFLICT = "urn:problem:conflict"
    INTERNAL = "urn:problem:internal"


def new_correlation_id() -> str:
    return f"urn:uuid:{uuid.uuid4()}"


def correlation_id_of(request: Request) -> str:
    cid = getattr(request.state, "correlation_id", None)
    return cid if isinstance(cid, str) and cid else new_correlation_id()


def _safe_detail(message: str) -> str:
    if len(message) > MAX_DETAIL_LENGTH:
        return message[:MAX_DETAIL_LENGTH] + "…"
    return message


def problem_response(
    request: Request,
    *,
    status: int,
    type_: ProblemType,
    title: str,
    detail: str | None,
    error_code: str,
    extensions: dict[str, object] | None = None,
) -> JSONResponse:
    cid = correlation_id_of(request)
    body: dict[str, object] = {
        "type": type_.value,
        "title": title,
        "status": status,
        "instance": f"urn:trace:{cid}",
        "errorCode": error_code,
        "correlationId": cid,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "method": request.method,
        "path": request.url.path or "/",
    }
    if detail:
        body["detail"] = _safe_detail(detail)
    if extensions:
        body.update(extensions)

    settings = getattr(request.app.state, "settings", None)
    header = settings.correlation_header if settings is not None else "X-Correlation-Id"
    return JSONResponse(
        status_code=status,
        content=body,
        media_type=PROBLEM_MEDIA_TYPE,
        headers={header: cid},
    )


def _on_domain_error(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, DomainError):
        raise exc
    logger.info(
        "Domain rule rejected request",
        extra={"error_code": exc.error_code, "correlation_id": correlation_id_of(request)},
    )
    if isinstance(exc, IllegalWorkflowStateError):
        return problem_response(
            request,
            status=409,
            type_=ProblemType.CONFLICT,
            title="Illegal workflow state",
            detail=exc.message,
            error_code=exc.error_code,
        )
    if isinstance(exc, CycleDetectedError):
        return problem_response(
            request,
            status=422,
            type_=ProblemType.WORKFLOW_CYCLE,
            title="Workflow contains a cycle",
            detail=exc.message,
            error_code=exc.error_code,
            extensions={"cycle": exc.cycle},
        )
    return problem_response(
        request,
        status=422,
        type_=ProblemType.VALIDATION,
        title="Workflow rule violated",
        detail=exc.message,
        error_code=exc.error_code,
    )


def _on_not_found(request: Request, exc: Exception) -> JSONResponse:
    return problem_response(
        request,
        status=404,
        type_=ProblemType.NOT_FOUND,
        title="Not found",
        detail=str(exc),
        error_code="NOT_FOUND",
    )


def _on_already_stored(request: Request, exc: Exception) -> JSONResponse:
    return problem_response(
        request,
        status=409,
        type_=ProblemType.CONFLICT,
        title="Conflict",
        detail=str(exc),
        error_code="WORKFLOW_EXISTS",
    )


def _on_request_validation(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        raise exc
    errors = [
        {
            "path": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "invalid"),
        }
        for err in exc.errors()
    ]
    return problem_response(
        request,
        status=400,
        type_=ProblemType.BAD_REQUEST,
        title="Validation failed",
        detail="One or more fields are invalid.",
        error_code="REQUEST_VALIDATION_ERROR",
        extensions={"errors": errors},
    )


def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception", extra={"correlation_id": correlation_id_of(request)}
    )
    return problem_response(
        request,
        status=500,
        type_=ProblemType.INTERNAL,
        title="Internal error",
        detail="Unexpected server error",
        error_code="INTERNAL_ERROR",
    )


def install_problem_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _on_domain_error)
    app.add_exception_handler(WorkflowNotFound, _on_not_found)
    app.add_exception_handler(WorkflowAlreadyStored, _on_already_stored)
    app.add_exception_handler(RequestValidationError, _on_request_validation)
    app.add_exception_handler(Exception, _on_unexpected)
