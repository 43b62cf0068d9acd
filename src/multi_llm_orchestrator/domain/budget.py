"""Token and cost budgets.

Both halves enforce ``0 <= used <= max`` at construction and are fail-closed:
consuming more than what remains raises instead of saturating. Callers check
``can_afford()`` / ``is_exhausted()`` before committing work, or treat
:class:`InsufficientBudgetError` as a hard stop.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass

from .errors import DomainValidationError, InsufficientBudgetError


@dataclass(frozen=True, slots=True)
class TokenBudget:
    max_tokens: int
    used_tokens: int = 0

    def __post_init__(self) -> None:
        if self.max_tokens < 0:
            raise DomainValidationError("maxTokens must be >= 0")
        if self.used_tokens < 0 or self.used_tokens > self.max_tokens:
            raise DomainValidationError("usedTokens must be between 0 and maxTokens")

    def remaining(self) -> int:
        return self.max_tokens - self.used_tokens

    def can_afford(self, tokens: int) -> bool:
        return self.remaining() >= tokens

    def is_exhausted(self) -> bool:
        return self.remaining() <= 0

    def consume(self, tokens: int) -> TokenBudget:
        if tokens < 0:
            raise DomainValidationError("tokens to consume must be >= 0")
        if not self.can_afford(tokens):
            raise InsufficientBudgetError("tokens", tokens, self.remaining())
        return TokenBudget(max_tokens=self.max_tokens, used_tokens=self.used_tokens + tokens)


@dataclass(frozen=True, slots=True)
class CostBudget:
    """Monetary budget, in USD."""

    max_cost: float
    used_cost: float = 0.0

    def __post_init__(self) -> None:
        if self.max_cost < 0:
            raise DomainValidationError("maxCost must be >= 0")
        if self.used_cost < 0 or self.used_cost > self.max_cost:
            raise DomainValidationError("usedCost must be between 0 and maxCost")

    def remaining(self) -> float:
        return self.max_cost - self.used_cost

    def can_afford(self, cost: float) -> bool:
        return self.remaining() >= cost

    def is_exhausted(self) -> bool:
        return self.remaining() <= 0.0

    def spend(self, cost: float) -> CostBudget:
        if cost < 0:
            raise DomainValidationError("cost to spend must be >= 0")
        if not self.can_afford(cost):
            raise InsufficientBudgetError("cost", cost, self.remaining())
        return CostBudget(max_cost=self.max_cost, used_cost=self.used_cost + cost)


@dataclass(frozen=True, slots=True)
class Budget:
    token_budget: TokenBudget
    cost_budget: CostBudget

    @classmethod
    def of(cls, max_tokens: int, max_cost: float) -> Budget:
        return cls(TokenBudget(max_tokens), CostBudget(max_cost))

    @classmethod
    def unlimited(cls) -> Budget:
        return cls(TokenBudget(sys.maxsize), CostBudget(sys.float_info.max))

    def is_exhausted(self) -> bool:
        # Exhausting either half exhausts the whole budget.
        return self.token_budget.is_exhausted() or self.cost_budget.is_exhausted()

    def can_afford(self, tokens: int = 0, cost: float = 0.0) -> bool:
        return self.token_budget.can_afford(tokens) and self.cost_budget.can_afford(cost)

    def consume_tokens(self, tokens: int) -> Budget:
        return Budget(self.token_budget.consume(tokens), self.cost_budget)

    def spend_cost(self, cost: float) -> Budget:
        return Budget(self.token_budget, self.cost_budget.spend(cost))
