"""Typecheck/compile marking for incremental builds."""

from __future__ import annotations

from typing import Callable, Mapping

from teal_build.graph.graph_models import Mark, Node
from teal_build.graph.ordering import ordered_nodes


def mark_typecheck(nodes: Mapping[str, Node], node: Node, _visited: set[str] | None = None) -> None:
    """Mark ``node`` and its dependents for re-typechecking.

    Nodes that already carry any mark are left alone, which also stops the walk
    from re-entering subtrees it has seen.
    """
    visited = set() if _visited is None else _visited
    if node.mark != Mark.UNSET or node.input in visited:
        return
    visited.add(node.input)
    node.mark = Mark.TYPECHECK
    for dep in sorted(node.dependents):
        dependent = nodes.get(dep)
        if dependent is not None:
            mark_typecheck(nodes, dependent, visited)


def mark_compile(nodes: Mapping[str, Node], node: Node) -> None:
    """Mark ``node`` for compilation; its dependents only need a typecheck."""
    if node.mark == Mark.COMPILE:
        return
    node.mark = Mark.COMPILE
    visited = {node.input}
    for dep in sorted(node.dependents):
        dependent = nodes.get(dep)
        if dependent is not None:
            mark_typecheck(nodes, dependent, visited)


def mark_each(nodes: Mapping[str, Node], predicate: Callable[[str], bool]) -> None:
    for node in ordered_nodes(nodes):
        if predicate(node.input):
            mark_compile(nodes, node)
