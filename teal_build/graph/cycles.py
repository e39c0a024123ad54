"""Cycle detection over the closed dependents relation."""

from __future__ import annotations

from typing import Mapping

from teal_build.graph.graph_models import Node


def detect_cycles(nodes: Mapping[str, Node]) -> list[str]:
    """Paths of every node that is its own (transitive) dependent, sorted.

    ``dependents`` is already a transitive closure, so a membership test finds
    cycles of any length without a DFS.
    """
    return sorted(path for path, node in nodes.items() if path in node.dependents)
