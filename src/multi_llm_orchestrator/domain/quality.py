"""Multi-dimensional quality scoring."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from statistics import fmean

from .errors import DomainValidationError

MIN_DIMENSION = 0.0
MAX_DIMENSION = 10.0


def _check_dimension(score: float, name: str) -> None:
    if score < MIN_DIMENSION or score > MAX_DIMENSION:
        raise DomainValidationError(f"{name} must be between 0 and 10, got: {score}")


@dataclass(frozen=True, slots=True)
class QualityScore:
    """Judge-assigned quality of one output.

    Each dimension is in [0, 10]; ``overall`` is always the mean of the four.
    """

    factual_accuracy: float
    coherence: float
    creativity: float
    efficiency: float
    overall: float = field(init=False)

    def __post_init__(self) -> None:
        _check_dimension(self.factual_accuracy, "factualAccuracy")
        _check_dimension(self.coherence, "coherence")
        _check_dimension(self.creativity, "creativity")
        _check_dimension(self.efficiency, "efficiency")
        overall = (self.factual_accuracy + self.coherence + self.creativity + self.efficiency) / 4.0
        object.__setattr__(self, "overall", overall)

    @classmethod
    def of(
        cls, factual_accuracy: float, coherence: float, creativity: float, efficiency: float
    ) -> QualityScore:
        return cls(factual_accuracy, coherence, creativity, efficiency)

    @classmethod
    def zero(cls) -> QualityScore:
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def aggregate(cls, scores: Sequence[QualityScore]) -> QualityScore:
        """Average each dimension independently across judges."""

        if not scores:
            return cls.zero()
        return cls(
            fmean(s.factual_accuracy for s in scores),
            fmean(s.coherence for s in scores),
            fmean(s.creativity for s in scores),
            fmean(s.efficiency for s in scores),
        )

    def meets(self, threshold: float) -> bool:
        return self.overall >= threshold
