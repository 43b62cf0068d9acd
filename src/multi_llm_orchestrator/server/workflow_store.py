"""In-memory workflow registry for the HTTP boundary.

Workflows are immutable values, so the store only needs to serialise its own
read-modify-write steps. Keys are workflow composite keys (``tenant:id``).

Nothing is persisted across restarts.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from multi_llm_orchestrator.domain.ids import WorkflowId
from multi_llm_orchestrator.workflow.workflow import Workflow


class WorkflowNotFound(KeyError):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Workflow not found: {self.key}"


class WorkflowAlreadyStored(Exception):
    def __init__(self, key: str) -> None:
        super().__init__(f"Workflow already exists: {key}")
        self.key = key


@dataclass
class WorkflowStore:
    _workflows: dict[str, Workflow] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def list(self, tenant_id: str | None = None) -> list[Workflow]:
        with self._lock:
            workflows = list(self._workflows.values())
        if tenant_id is None:
            return workflows
        return [w for w in workflows if w.id.tenant_id == tenant_id]

    def get(self, workflow_id: WorkflowId) -> Workflow:
        with self._lock:
            found = self._workflows.get(workflow_id.composite_key)
        if found is None:
            raise WorkflowNotFound(workflow_id.composite_key)
        return found

    def add(self, workflow: Workflow) -> Workflow:
        key = workflow.id.composite_key
        with self._lock:
            if key in self._workflows:
                raise WorkflowAlreadyStored(key)
            self._workflows[key] = workflow
            return workflow

    def update(self, workflow_id: WorkflowId, change: Callable[[Workflow], Workflow]) -> Workflow:
        """Apply ``change`` to the stored workflow atomically.

        If ``change`` raises, the stored value is left as it was.
        """

        key = workflow_id.composite_key
        with self._lock:
            current = self._workflows.get(key)
            if current is None:
                raise WorkflowNotFound(key)
            updated = change(current)
            self._workflows[key] = updated
            return updated
