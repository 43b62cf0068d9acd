"""Per-node execution settings and data-movement contracts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from multi_llm_orchestrator.domain.errors import DomainValidationError
from multi_llm_orchestrator.domain.paths import MISSING, TEMPLATE_PATTERN, placeholder, resolve_path


@dataclass(frozen=True, slots=True)
class NodeConstraints:
    """Limits an executor must honour when running a node."""

    max_tokens_out: int
    timeout_ms: int
    temperature: float
    max_retries: int
    min_quality_score: float

    def __post_init__(self) -> None:
        if self.max_tokens_out <= 0:
            raise DomainValidationError("maxTokensOut must be > 0")
        if self.timeout_ms <= 0:
            raise DomainValidationError("timeoutMs must be > 0")
        if self.temperature < 0 or self.temperature > 2.0:
            raise DomainValidationError("temperature must be between 0 and 2.0")
        if self.max_retries < 0:
            raise DomainValidationError("maxRetries must be >= 0")
        if self.min_quality_score < 0 or self.min_quality_score > 20:
            raise DomainValidationError("minQualityScore must be between 0 and 20")

    @classmethod
    def defaults(cls) -> NodeConstraints:
        return cls(
            max_tokens_out=4000,
            timeout_ms=30000,
            temperature=1.0,
            max_retries=2,
            min_quality_score=0.0,
        )


@dataclass(frozen=True, slots=True)
class InputMapping:
    """Maps node input fields to literals or ``{{dotted.path}}`` templates.

    Only a value that is a template in its entirety is resolved; anything else
    is passed through as a literal. ``apply`` never raises: a template whose
    path cannot be resolved yields its own ``{{path}}`` text.
    """

    mappings: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "mappings", MappingProxyType(dict(self.mappings)))

    @classmethod
    def of(cls, mappings: Mapping[str, str]) -> InputMapping:
        return cls(mappings)

    @classmethod
    def passthrough(cls) -> InputMapping:
        return cls({})

    def apply(self, context: Mapping[str, object]) -> Mapping[str, object]:
        if not self.mappings:
            return context
        return {key: self._resolve(template, context) for key, template in self.mappings.items()}

    @staticmethod
    def _resolve(template: str, context: Mapping[str, object]) -> object:
        match = TEMPLATE_PATTERN.fullmatch(template)
        if match is None:
            return template
        path = match.group(1)
        value = resolve_path(path, context)
        return placeholder(path) if value is MISSING else value


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "boolean": lambda v: isinstance(v, bool),
    "array": lambda v: isinstance(v, (list, tuple, set, frozenset)),
    "object": lambda v: isinstance(v, Mapping),
}


@dataclass(frozen=True, slots=True)
class OutputSchema:
    """Coarse output contract: field name -> type tag.

    Recognised tags are string, number, boolean, array and object (case
    insensitive). Any other tag accepts every value. An empty schema accepts
    any output.
    """

    fields: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def of(cls, fields: Mapping[str, str]) -> OutputSchema:
        return cls(fields)

    @classmethod
    def any(cls) -> OutputSchema:
        return cls({})

    def validate(self, output: Mapping[str, object]) -> None:
        for name, expected in self.fields.items():
            if name not in output:
                raise DomainValidationError(f"Missing required field: {name}")
            check = _TYPE_CHECKS.get(expected.lower())
            if check is not None and not check(output[name]):
                raise DomainValidationError(
                    f"Field {name} has wrong type, expected {expected}"
                )
