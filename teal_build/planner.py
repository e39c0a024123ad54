"""Incremental build planning: which files to typecheck and which to compile."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from teal_build import paths
from teal_build.config import BuildConfig
from teal_build.errors import CycleError, PlanError
from teal_build.graph import Graph, Mark, Node
from teal_build.resolver import ModuleResolver

logger = logging.getLogger(__name__)

OUTPUT_EXT = ".lua"


@dataclass
class BuildPlan:
    graph: Graph
    typecheck: list[Node] = field(default_factory=list)
    compile: list[Node] = field(default_factory=list)
    unresolved: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.typecheck and not self.compile


def project_relative(directory: str) -> str:
    """Express ``directory`` relative to the working directory when possible.

    The graph ignores absolute paths, so an absolute source dir inside the
    project has to be turned into a relative one first.
    """
    if paths.is_absolute(directory) and paths.is_inside(directory, os.getcwd()):
        return paths.relative_to(directory, os.getcwd())
    return paths.canonicalize(directory)


def output_path(config: BuildConfig, source: str) -> str | None:
    """Where ``source`` compiles to; None for declaration files."""
    if paths.is_declaration(source):
        return None
    source_dir = project_relative(config.source_dir)
    if config.build_dir and paths.is_inside(source, source_dir):
        rel = paths.relative_to(source, source_dir)
        return paths.with_extension(paths.join(project_relative(config.build_dir), rel), OUTPUT_EXT)
    return paths.with_extension(source, OUTPUT_EXT)


def needs_compile(node: Node, graph: Graph | None = None) -> bool:
    """True when the output is missing or older than its source.

    A file without output (a declaration) counts as changed when it is newer
    than the output of any of its dependents in ``graph``.
    """
    if node.output is not None:
        try:
            return os.path.getmtime(node.output) < os.path.getmtime(node.input)
        except OSError:
            return True
    if graph is None:
        return False
    source_mtime = os.path.getmtime(node.input)
    for dep in node.dependents:
        dependent = graph.find(dep)
        if dependent is None or dependent.output is None:
            continue
        try:
            if os.path.getmtime(dependent.output) < source_mtime:
                return True
        except OSError:
            # the dependent is recompiled on its own
            continue
    return False


def build_graph(config: BuildConfig, files: list[str] | None = None) -> Graph:
    """Graph for the whole source dir, or just ``files`` and their requires.

    Raises CycleError when a circular require is found.
    """
    source_dir = project_relative(config.source_dir)
    resolver = ModuleResolver([project_relative(d) for d in config.search_dirs()])

    if files:
        graph = Graph.empty(resolver=resolver)
        for f in files:
            ok, cycles = graph.insert_file(project_relative(f), source_dir)
            if not ok:
                raise CycleError(cycles or [])
    else:
        graph, cycles = Graph.scan_dir(
            source_dir,
            config.include,
            config.exclude,
            resolver=resolver,
            skip_dirs=config.skip_dirs,
        )
        if graph is None:
            raise CycleError(cycles or [])

    for node in graph:
        node.output = output_path(config, node.input)
    return graph


def plan_build(
    config: BuildConfig,
    files: list[str] | None = None,
    force: bool = False,
) -> BuildPlan:
    """Scan the project and mark what an incremental build has to do.

    With ``files``, exactly those files are treated as changed. Otherwise a
    file is changed when ``needs_compile`` says so. ``force`` marks every file.

    Raises PlanError when a named file is not part of the graph.
    """
    graph = build_graph(config)

    selected = {project_relative(f) for f in files or []}
    unknown = sorted(f for f in selected if graph.find(f) is None)
    if unknown:
        raise PlanError("Not a source file in this project: " + ", ".join(unknown))

    def changed(path: str) -> bool:
        if force:
            return True
        if selected:
            return path in selected
        return needs_compile(graph.find(path), graph)

    graph.mark_each(changed)

    plan = BuildPlan(
        graph=graph,
        typecheck=list(graph.marked_nodes(Mark.TYPECHECK)),
        compile=list(graph.marked_nodes(Mark.COMPILE)),
        unresolved={n.input: n.unresolved for n in graph if n.unresolved},
    )
    logger.info(
        "build plan: %d to compile, %d to typecheck", len(plan.compile), len(plan.typecheck),
    )
    return plan
