"""Domain error families.

Every error raised by the workflow model carries a stable ``error_code`` that
callers can branch on without parsing the message. Messages are safe to expose.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all workflow-model failures."""

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, *, error_code: str | None = None) -> None:
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code

    @property
    def message(self) -> str:
        return str(self)


class DomainValidationError(DomainError, ValueError):
    """A structural or construction-time invariant was violated."""

    error_code = "DOMAIN_VALIDATION_ERROR"


class CycleDetectedError(DomainError):
    error_code = "WORKFLOW_CYCLE"

    def __init__(self, node_id: str, cycle: list[str] | None = None) -> None:
        message = f"Cycle detected at node: {node_id}"
        if cycle:
            message += f" ({' -> '.join(cycle)})"
        super().__init__(message)
        self.node_id = node_id
        self.cycle = list(cycle or [])


class QuorumNotReachedError(DomainError):
    error_code = "QUORUM_NOT_REACHED"

    def __init__(self, actual: float, required: float, unit: str = "votes") -> None:
        super().__init__(f"Quorum not reached: {actual:g}/{required:g} {unit} received")
        self.actual = actual
        self.required = required
        self.unit = unit


class InsufficientBudgetError(DomainError):
    error_code = "INSUFFICIENT_BUDGET"

    def __init__(self, resource: str, required: float, available: float) -> None:
        super().__init__(f"Insufficient {resource}: need {required}, have {available}")
        self.resource = resource
        self.required = required
        self.available = available


class InvalidTopologyError(DomainError):
    error_code = "INVALID_TOPOLOGY"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid workflow topology: {reason}")
        self.reason = reason


class IllegalWorkflowStateError(DomainError, RuntimeError):
    """A lifecycle rule was broken (e.g. mutating a published workflow)."""

    error_code = "ILLEGAL_STATE"


class GlobalAverageNotMetError(DomainError):
    error_code = "GLOBAL_AVERAGE_NOT_MET"

    def __init__(self, average: float, required: float) -> None:
        super().__init__(f"Global average not met: {average:.2f} < {required}")
        self.average = average
        self.required = required
