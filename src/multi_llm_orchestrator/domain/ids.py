"""Strongly-typed identifiers.

All identifiers wrap a non-blank string and compare by value. ``WorkflowId``
is tenant-qualified and exposes a composite key used for partitioning and
indexing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from .errors import DomainValidationError


def _require_text(value: object, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(f"{label} cannot be blank")


@dataclass(frozen=True, slots=True)
class NodeId:
    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "NodeId")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of(cls, value: str) -> NodeId:
        return cls(value)

    @classmethod
    def generate(cls) -> NodeId:
        return cls(str(uuid.uuid4()))


@dataclass(frozen=True, slots=True)
class ExecutionId:
    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "ExecutionId")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of(cls, value: str) -> ExecutionId:
        return cls(value)

    @classmethod
    def generate(cls) -> ExecutionId:
        return cls(str(uuid.uuid4()))


@dataclass(frozen=True, slots=True)
class ConsensusSessionId:
    value: str

    def __post_init__(self) -> None:
        _require_text(self.value, "ConsensusSessionId")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of(cls, value: str) -> ConsensusSessionId:
        return cls(value)

    @classmethod
    def generate(cls) -> ConsensusSessionId:
        return cls(str(uuid.uuid4()))


@dataclass(frozen=True, slots=True)
class WorkflowId:
    """Workflow identity with tenant isolation built in."""

    tenant_id: str
    value: str

    def __post_init__(self) -> None:
        _require_text(self.tenant_id, "TenantId")
        _require_text(self.value, "WorkflowId")

    def __str__(self) -> str:
        return self.composite_key

    @property
    def composite_key(self) -> str:
        """``tenant:value``, used for storage indexes and event partitioning."""

        return f"{self.tenant_id}:{self.value}"

    @classmethod
    def of(cls, tenant_id: str, value: str) -> WorkflowId:
        return cls(tenant_id=tenant_id, value=value)

    @classmethod
    def generate(cls, tenant_id: str) -> WorkflowId:
        return cls(tenant_id=tenant_id, value=str(uuid.uuid4()))

    @classmethod
    def parse_composite_key(cls, key: str) -> WorkflowId:
        tenant_id, sep, value = key.partition(":")
        if not sep:
            raise DomainValidationError(f"Not a workflow composite key: {key!r}")
        return cls(tenant_id=tenant_id, value=value)
