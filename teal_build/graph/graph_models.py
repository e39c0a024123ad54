"""Data models for the source dependency graph."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Mark(enum.IntEnum):
    """Per-build decision for a node. Only ever escalates."""
    UNSET = 0
    TYPECHECK = 1
    COMPILE = 2


@dataclass(eq=False)
class Node:
    input: str
    output: str | None = None
    requires: list[str] = field(default_factory=list)  # module refs as written
    modules: dict[str, str] = field(default_factory=dict)  # module ref -> canonical path
    dependents: set[str] = field(default_factory=set)  # transitive, canonical paths
    mark: Mark = Mark.UNSET

    @property
    def unresolved(self) -> list[str]:
        return [ref for ref in self.requires if ref not in self.modules]

    def __repr__(self) -> str:
        return f"Node({self.input!r}, mark={self.mark.name})"
