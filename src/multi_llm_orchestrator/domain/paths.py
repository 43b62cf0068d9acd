"""Dotted-path lookup and ``{{path}}`` template helpers shared by the model."""

from __future__ import annotations

import re
from collections.abc import Mapping

TEMPLATE_PATTERN = re.compile(r"\{\{([^}]+)}}")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def resolve_path(path: str, data: Mapping[str, object]) -> object:
    """Walk ``a.b.c`` through nested mappings.

    Returns :data:`MISSING` when any segment is absent, maps to ``None``, or
    the walk reaches a non-mapping value before the last segment.
    """

    current: object = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return MISSING
        current = current.get(part)
        if current is None:
            return MISSING
    return current


def placeholder(path: str) -> str:
    return "{{" + path + "}}"
