"""Workflow definition model.

This package introduces first-class types for:
- the six node kinds and their structural invariants
- per-node constraints and input/output contracts
- the workflow aggregate and its publish lifecycle
- the derived execution graph and cycle detection
- JSON workflow documents
"""

from multi_llm_orchestrator.workflow.constraints import InputMapping, NodeConstraints, OutputSchema
from multi_llm_orchestrator.workflow.graph import ExecutionGraph
from multi_llm_orchestrator.workflow.nodes import (
    AgentNode,
    FanoutNode,
    LoopNode,
    Node,
    NodeKind,
    ReduceNode,
    VetoNode,
    VoteNode,
)
from multi_llm_orchestrator.workflow.workflow import PublishResult, Workflow, WorkflowStatus

__all__ = [
    "AgentNode",
    "ExecutionGraph",
    "FanoutNode",
    "InputMapping",
    "LoopNode",
    "Node",
    "NodeConstraints",
    "NodeKind",
    "OutputSchema",
    "PublishResult",
    "ReduceNode",
    "VetoNode",
    "VoteNode",
    "Workflow",
    "WorkflowStatus",
]
