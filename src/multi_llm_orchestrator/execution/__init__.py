"""Execution-time value objects consumed by a node executor."""

from multi_llm_orchestrator.execution.context import (
    ExecutionContext,
    ExecutionStatus,
    ExecutionStrategy,
)

__all__ = ["ExecutionContext", "ExecutionStatus", "ExecutionStrategy"]
