"""Test utilities for the orgast test suite.

This module provides helpers for comparing parse trees independently of the
source positions recorded on every node.
"""

import dataclasses
from typing import Any

from orgast.ast.nodes import Node

IGNORED_FIELDS = frozenset({"pos", "end_pos"})


def tree_signature(value: Any) -> Any:
    """Return a hashable, position-free description of a node tree.

    Dataclasses are described by their type name and fields (positions
    excluded); callables such as include resolvers compare equal to each
    other.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = tuple(
            (f.name, tree_signature(getattr(value, f.name)))
            for f in dataclasses.fields(value)
            if f.name not in IGNORED_FIELDS
        )
        return (type(value).__name__,) + fields
    if isinstance(value, (list, tuple)):
        return tuple(tree_signature(item) for item in value)
    if isinstance(value, dict):
        return tuple(sorted((key, tree_signature(item)) for key, item in value.items()))
    if callable(value):
        return "<callable>"
    return value


def walk(nodes: list[Node]):
    """Yield every node of a tree depth first."""
    for node in nodes:
        yield node
        yield from walk(node.get_children())
