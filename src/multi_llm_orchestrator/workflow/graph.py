"""Read-only adjacency view of a workflow."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from multi_llm_orchestrator.domain.errors import CycleDetectedError, InvalidTopologyError
from multi_llm_orchestrator.domain.ids import NodeId
from multi_llm_orchestrator.workflow.cycles import find_cycle


@dataclass(frozen=True, slots=True)
class ExecutionGraph:
    """Node -> ordered successors, plus the designated entry node.

    Every query is recomputed from the adjacency list; workflow graphs are
    authoring-scale, so there is no caching.
    """

    adjacency: Mapping[NodeId, tuple[NodeId, ...]]
    entry_node: NodeId

    def __post_init__(self) -> None:
        frozen = {node: tuple(successors) for node, successors in self.adjacency.items()}
        if self.entry_node not in frozen:
            raise InvalidTopologyError(f"entry node {self.entry_node.value} is not in the graph")
        object.__setattr__(self, "adjacency", MappingProxyType(frozen))

    @classmethod
    def of(cls, edges: Mapping[NodeId, Sequence[NodeId]], entry_node: NodeId) -> ExecutionGraph:
        return cls(adjacency={k: tuple(v) for k, v in edges.items()}, entry_node=entry_node)

    def all_nodes(self) -> frozenset[NodeId]:
        return frozenset(self.adjacency)

    def root_nodes(self) -> frozenset[NodeId]:
        """Nodes with no incoming edge."""

        with_incoming = {target for successors in self.adjacency.values() for target in successors}
        return frozenset(node for node in self.adjacency if node not in with_incoming)

    def leaf_nodes(self) -> frozenset[NodeId]:
        """Nodes with no outgoing edge."""

        return frozenset(node for node, successors in self.adjacency.items() if not successors)

    def dependencies(self, node_id: NodeId) -> frozenset[NodeId]:
        """Nodes with an edge into ``node_id``."""

        return frozenset(
            source for source, successors in self.adjacency.items() if node_id in successors
        )

    def successors(self, node_id: NodeId) -> tuple[NodeId, ...]:
        return self.adjacency.get(node_id, ())

    def topological_order(self) -> list[NodeId]:
        """Kahn's algorithm; ties keep adjacency insertion order.

        Raises:
            CycleDetectedError: if the adjacency list is not acyclic.
        """

        in_degree = {node: 0 for node in self.adjacency}
        for successors in self.adjacency.values():
            for target in successors:
                if target in in_degree:
                    in_degree[target] += 1

        queue = deque(node for node, degree in in_degree.items() if degree == 0)
        order: list[NodeId] = []
        while queue:
            node = queue.popleft()
            order.append(node)
            for target in self.adjacency[node]:
                if target not in in_degree:
                    continue
                in_degree[target] -= 1
                if in_degree[target] == 0:
                    queue.append(target)

        if len(order) != len(in_degree):
            cycle = find_cycle(self.adjacency) or []
            culprit = cycle[0] if cycle else next(n for n, d in in_degree.items() if d > 0)
            raise CycleDetectedError(culprit.value, [n.value for n in cycle])
        return order
