from __future__ import annotations

import pytest

from multi_llm_orchestrator.domain.budget import Budget, CostBudget, TokenBudget
from multi_llm_orchestrator.domain.errors import DomainValidationError, InsufficientBudgetError


def test_consume_returns_new_budget() -> None:
    budget = TokenBudget(100)
    used = budget.consume(40)

    assert budget.used_tokens == 0
    assert used.used_tokens == 40
    assert used.remaining() == 60


def test_consuming_exactly_the_remainder_exhausts() -> None:
    budget = TokenBudget(100, 60).consume(40)
    assert budget.remaining() == 0
    assert budget.is_exhausted()


def test_overspend_is_rejected() -> None:
    budget = TokenBudget(100, 90)
    with pytest.raises(InsufficientBudgetError) as excinfo:
        budget.consume(20)
    assert excinfo.value.error_code == "INSUFFICIENT_BUDGET"
    assert excinfo.value.available == 10
    assert budget.used_tokens == 90
    assert budget.remaining() == 10


def test_negative_amounts_are_rejected() -> None:
    with pytest.raises(DomainValidationError):
        TokenBudget(100).consume(-1)
    with pytest.raises(DomainValidationError):
        CostBudget(1.0).spend(-0.5)


def test_construction_invariants() -> None:
    with pytest.raises(DomainValidationError):
        TokenBudget(-1)
    with pytest.raises(DomainValidationError):
        TokenBudget(10, 11)
    with pytest.raises(DomainValidationError):
        CostBudget(1.0, 2.0)


def test_cost_budget_spend() -> None:
    budget = CostBudget(1.0).spend(0.25)
    assert budget.remaining() == pytest.approx(0.75)
    assert budget.can_afford(0.75)
    assert not budget.can_afford(0.8)
    with pytest.raises(InsufficientBudgetError, match="Insufficient cost"):
        budget.spend(1.0)


def test_budget_is_exhausted_when_either_half_is() -> None:
    assert Budget.of(100, 0.0).is_exhausted()
    assert Budget.of(0, 5.0).is_exhausted()
    assert not Budget.of(100, 5.0).is_exhausted()


def test_budget_operations_touch_one_half() -> None:
    budget = Budget.of(100, 5.0).consume_tokens(30).spend_cost(1.5)
    assert budget.token_budget.used_tokens == 30
    assert budget.cost_budget.used_cost == pytest.approx(1.5)
    assert budget.can_afford(tokens=70, cost=3.5)
    assert not budget.can_afford(tokens=71)


def test_unlimited_budget() -> None:
    budget = Budget.unlimited()
    assert not budget.is_exhausted()
    assert budget.can_afford(tokens=10**9, cost=10**9)
