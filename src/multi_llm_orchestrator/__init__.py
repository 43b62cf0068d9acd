"""Multi-LLM Orchestrator.

Definition and validation model for multi-LLM workflows:
- typed identifiers, budgets, quality scores and consensus rules
- immutable execution context with template rendering
- six node kinds composed into a publishable workflow aggregate
- a derived execution graph with cycle detection
"""

__version__ = "0.1.0"

from multi_llm_orchestrator.config import EngineSettings
from multi_llm_orchestrator.execution.context import ExecutionContext
from multi_llm_orchestrator.workflow.graph import ExecutionGraph
from multi_llm_orchestrator.workflow.workflow import Workflow, WorkflowStatus

__all__ = [
    "__version__",
    "EngineSettings",
    "ExecutionContext",
    "ExecutionGraph",
    "Workflow",
    "WorkflowStatus",
]
