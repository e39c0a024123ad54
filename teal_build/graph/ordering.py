"""Most-dependents-first traversal."""

from __future__ import annotations

from typing import Iterator, Mapping

from teal_build.graph.graph_models import Mark, Node


def dependent_counts(nodes: Mapping[str, Node]) -> dict[str, int]:
    """Weighted dependent count for every node.

    count(N) = sum(1 + count(D) for D in N.dependents). Since ``dependents`` is
    already closed this counts dependency paths rather than distinct nodes, so
    diamonds weigh more than ``len(dependents)``. Ordering relies on this value
    as is.
    """
    counts: dict[str, int] = {}
    in_progress: set[str] = set()

    def count(path: str) -> int:
        if path in counts:
            return counts[path]
        if path in in_progress:
            # only reachable on a cyclic graph
            return 0
        in_progress.add(path)
        total = 0
        for dep in sorted(nodes[path].dependents):
            if dep in nodes:
                total += 1 + count(dep)
        in_progress.discard(path)
        counts[path] = total
        return total

    for path in nodes:
        count(path)
    return counts


def ordered_nodes(nodes: Mapping[str, Node]) -> Iterator[Node]:
    """Yield every node once, highest dependent count first, ties by path."""
    counts = dependent_counts(nodes)
    for path in sorted(nodes, key=lambda p: (-counts[p], p)):
        yield nodes[path]


def marked_nodes(nodes: Mapping[str, Node], mark: Mark) -> Iterator[Node]:
    for node in ordered_nodes(nodes):
        if node.mark == mark:
            yield node
