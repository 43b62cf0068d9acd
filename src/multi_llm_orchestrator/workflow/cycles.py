"""Cycle detection over a node registry.

Three-colour depth-first search (white: unseen, grey: on the current path,
black: fully explored) driven by an explicit stack, so deep graphs do not hit
the interpreter's recursion limit.

Traversal starts from every registry key in insertion order, not only from
the entry node, so cycles unreachable from the entry are still found. The
reported culprit is the grey node that was reached again; it is always a
member of the cycle.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from multi_llm_orchestrator.domain.ids import NodeId

_WHITE, _GREY, _BLACK = 0, 1, 2


def find_cycle(edges: Mapping[NodeId, Iterable[NodeId]]) -> list[NodeId] | None:
    """Return the first cycle found as a closed path, or None for a DAG.

    ``edges`` maps a node to its successors. Successors that are not keys of
    ``edges`` are treated as leaves.
    """

    colour: dict[NodeId, int] = {}

    for start in edges:
        if colour.get(start, _WHITE) != _WHITE:
            continue

        colour[start] = _GREY
        path: list[NodeId] = [start]
        stack = [iter(tuple(edges[start]))]

        while stack:
            advanced = False
            for successor in stack[-1]:
                if successor not in edges:
                    continue
                state = colour.get(successor, _WHITE)
                if state == _GREY:
                    cycle_start = path.index(successor)
                    return path[cycle_start:] + [successor]
                if state == _WHITE:
                    colour[successor] = _GREY
                    path.append(successor)
                    stack.append(iter(tuple(edges[successor])))
                    advanced = True
                    break
            if not advanced:
                colour[path.pop()] = _BLACK
                stack.pop()

    return None


def has_cycle(edges: Mapping[NodeId, Iterable[NodeId]]) -> bool:
    return find_cycle(edges) is not None
