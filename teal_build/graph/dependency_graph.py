"""Dependency graph builder: inserts Teal sources, closes the dependents relation, detects cycles."""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from teal_build import paths
from teal_build.errors import ParseError
from teal_build.graph.cycles import detect_cycles
from teal_build.graph.graph_models import Mark, Node
from teal_build.graph import marking, ordering
from teal_build.parser import parse_requires
from teal_build.resolver import ModuleResolver
from teal_build.scanner import scan_files

logger = logging.getLogger(__name__)

Parser = Callable[[str], list[str]]
InsertResult = tuple[bool, list[str] | None]


class Graph:
    """Source files keyed by canonical path, plus who-requires-whom."""

    def __init__(
        self,
        resolver: ModuleResolver | None = None,
        parser: Parser = parse_requires,
    ):
        self.resolver = resolver or ModuleResolver()
        self.parser = parser
        self._nodes: dict[str, Node] = {}

    @classmethod
    def empty(cls, resolver: ModuleResolver | None = None, parser: Parser = parse_requires) -> Graph:
        return cls(resolver=resolver, parser=parser)

    @classmethod
    def scan_dir(
        cls,
        directory: str,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
        resolver: ModuleResolver | None = None,
        parser: Parser = parse_requires,
        skip_dirs: list[str] | None = None,
    ) -> tuple[Graph | None, list[str] | None]:
        """Build a graph from every selected file under ``directory``.

        Returns ``(None, cycle_files)`` on the first insertion that reports
        a cycle.
        """
        graph = cls(resolver=resolver, parser=parser)
        if paths.is_absolute(directory):
            logger.warning(
                "scan directory %s is absolute; its files are outside the project and are skipped",
                directory,
            )
        for path in scan_files(directory, include, exclude, skip_dirs):
            ok, cycles = graph.insert_file(path, directory)
            if not ok:
                return None, cycles
        logger.info("scanned %s: %d node(s)", directory, len(graph))
        return graph, None

    # ── Node store ──────────────────────────────────────────

    def _create(self, path: str) -> Node:
        node = Node(input=path)
        self._nodes[path] = node
        return node

    def find(self, path: str) -> Node | None:
        return self._nodes.get(paths.canonicalize(path))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: str) -> bool:
        return self.find(path) is not None

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    # ── Building ────────────────────────────────────────────

    def insert_file(self, path: str, scope_dir: str | None = None) -> InsertResult:
        """Insert ``path`` and everything it requires.

        Returns ``(True, None)``, or ``(False, cycle_files)`` when the graph
        now contains a circular require.
        """
        self._insert(str(path), scope_dir)
        self._rebuild_dependents()
        cycles = detect_cycles(self._nodes)
        if cycles:
            logger.info("circular dependency involving %s", ", ".join(cycles))
            return False, cycles
        return True, None

    def _insert(self, path: str, scope_dir: str | None) -> None:
        if paths.is_absolute(path):
            logger.debug("skipping absolute path %s", path)
            return
        path = paths.canonicalize(path)
        if path in self._nodes:
            return
        if paths.extension_of(path) != paths.SOURCE_EXT:
            return
        try:
            requires = self.parser(path)
        except ParseError as e:
            logger.debug("skipping %s: %s", path, e.reason)
            return

        node = self._create(path)
        node.requires = list(requires)

        for ref in node.requires:
            resolved = self.resolver.resolve(ref, prefer_source=True)
            if resolved is None:
                logger.debug("%s: unresolved module %r", path, ref)
                continue
            if scope_dir is not None:
                if paths.is_inside(resolved, scope_dir):
                    resolved = paths.join(scope_dir, paths.relative_to(resolved, scope_dir))
                else:
                    node.modules[ref] = paths.canonicalize(resolved)
                    continue
            node.modules[ref] = paths.canonicalize(resolved)
            self._insert(resolved, scope_dir)

    def _rebuild_dependents(self) -> None:
        """Close ``dependents`` over ``modules``; repeats until nothing grows."""
        changed = True
        while changed:
            changed = False
            for path, node in self._nodes.items():
                for target_path in node.modules.values():
                    target = self._nodes.get(target_path)
                    if target is None:
                        continue
                    before = len(target.dependents)
                    target.dependents.add(path)
                    target.dependents |= node.dependents
                    if len(target.dependents) != before:
                        changed = True

    def cycles(self) -> list[str]:
        return detect_cycles(self._nodes)

    # ── Traversal and marking ───────────────────────────────

    def dependent_counts(self) -> dict[str, int]:
        return ordering.dependent_counts(self._nodes)

    def nodes(self) -> Iterator[Node]:
        """Nodes with the most dependents first. Each call starts a new pass."""
        return ordering.ordered_nodes(self._nodes)

    def marked_nodes(self, mark: Mark) -> Iterator[Node]:
        return ordering.marked_nodes(self._nodes, mark)

    def mark_compile(self, node: Node) -> None:
        marking.mark_compile(self._nodes, node)

    def mark_typecheck(self, node: Node) -> None:
        marking.mark_typecheck(self._nodes, node)

    def mark_each(self, predicate: Callable[[str], bool]) -> None:
        marking.mark_each(self._nodes, predicate)
