"""Source dependency graph: insertion, cycle detection, ordering and marking."""

from teal_build.graph.dependency_graph import Graph
from teal_build.graph.graph_models import Mark, Node
from teal_build.graph.cycles import detect_cycles

__all__ = [
    "Graph",
    "Mark",
    "Node",
    "detect_cycles",
]
