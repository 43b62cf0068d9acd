"""Value objects shared across the workflow model.

This package holds identifiers, error families, budgets, quality scores,
consensus rules and domain event records. Nothing here performs I/O.
"""

from multi_llm_orchestrator.domain.budget import Budget, CostBudget, TokenBudget
from multi_llm_orchestrator.domain.consensus import (
    Ballot,
    ConsensusOutcome,
    ConsensusRule,
    ConsensusStrategy,
    Voter,
    evaluate_scores,
)
from multi_llm_orchestrator.domain.errors import (
    CycleDetectedError,
    DomainError,
    DomainValidationError,
    GlobalAverageNotMetError,
    IllegalWorkflowStateError,
    InsufficientBudgetError,
    InvalidTopologyError,
    QuorumNotReachedError,
)
from multi_llm_orchestrator.domain.events import (
    ConsensusAchieved,
    DomainEvent,
    ExecutionStarted,
    NodeExecuted,
    WorkflowPublished,
)
from multi_llm_orchestrator.domain.ids import ConsensusSessionId, ExecutionId, NodeId, WorkflowId
from multi_llm_orchestrator.domain.quality import QualityScore

__all__ = [
    "Ballot",
    "Budget",
    "ConsensusAchieved",
    "ConsensusOutcome",
    "ConsensusRule",
    "ConsensusSessionId",
    "ConsensusStrategy",
    "CostBudget",
    "CycleDetectedError",
    "DomainError",
    "DomainEvent",
    "DomainValidationError",
    "ExecutionId",
    "ExecutionStarted",
    "GlobalAverageNotMetError",
    "IllegalWorkflowStateError",
    "InsufficientBudgetError",
    "InvalidTopologyError",
    "NodeExecuted",
    "NodeId",
    "QualityScore",
    "QuorumNotReachedError",
    "TokenBudget",
    "Voter",
    "WorkflowId",
    "WorkflowPublished",
    "evaluate_scores",
]
