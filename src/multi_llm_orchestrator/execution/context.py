"""Immutable execution context.

The context is the data an executor threads between nodes: user-supplied
variables and per-node results, plus the correlation id of the run. Every
update returns a new context; the original is never touched, so a snapshot
can be shared between threads without locking.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.domain.paths import MISSING, TEMPLATE_PATTERN, resolve_path


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


def _freeze(value: object) -> object:
    """Copy ``value`` into read-only form, all the way down."""

    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return value


class ExecutionStrategy(str, Enum):
    """How an executor schedules independent nodes.

    SEQUENTIAL runs one node at a time, PARALLEL runs all ready nodes
    concurrently and SPECULATIVE launches variants and keeps the winner.
    """

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    SPECULATIVE = "speculative"


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    variables: Mapping[str, object]
    results: Mapping[NodeId, Mapping[str, object]]
    correlation_id: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", _freeze(self.variables))
        object.__setattr__(
            self, "results", MappingProxyType({k: _freeze(v) for k, v in self.results.items()})
        )

    @classmethod
    def initial(
        cls, user_inputs: Mapping[str, object], correlation_id: str | None = None
    ) -> ExecutionContext:
        """Start a run with the caller's inputs available under ``user``."""

        return cls(
            variables={"user": dict(user_inputs)},
            results={},
            correlation_id=correlation_id or str(uuid.uuid4()),
        )

    def with_variable(self, key: str, value: object) -> ExecutionContext:
        return ExecutionContext(
            variables={**self.variables, key: value},
            results=self.results,
            correlation_id=self.correlation_id,
        )

    def with_result(self, node_id: NodeId, result: Mapping[str, object]) -> ExecutionContext:
        return ExecutionContext(
            variables=self.variables,
            results={**self.results, node_id: result},
            correlation_id=self.correlation_id,
        )

    def get_variable(self, path: str) -> object | None:
        value = resolve_path(path, self.variables)
        return None if value is MISSING else value

    def get_result(self, node_id: NodeId) -> Mapping[str, object] | None:
        return self.results.get(node_id)

    def render_template(self, template: str | None) -> str:
        """Substitute every ``{{path}}`` with its variable's display form.

        Each placeholder is resolved once; substituted text is not scanned
        again. Placeholders whose path is missing stay as written.
        """

        if template is None:
            return ""

        def _substitute(match: re.Match[str]) -> str:
            value = resolve_path(match.group(1), self.variables)
            if value is MISSING:
                return match.group(0)
            return str(value)

        return TEMPLATE_PATTERN.sub(_substitute, template)
