"""Click CLI with graph, check, and plan subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from teal_build import __version__
from teal_build.config import CONFIG_FILENAME, BuildConfig, load_config
from teal_build.errors import CycleError, TealBuildError
from teal_build.graph import Graph, Node
from teal_build.planner import build_graph, plan_build


def _load(config_path: Path | None) -> BuildConfig:
    try:
        return load_config(config_path)
    except TealBuildError as e:
        raise click.ClickException(str(e))


def _build(config: BuildConfig) -> Graph:
    try:
        return build_graph(config)
    except CycleError as e:
        _echo_cycle(e.files)
        raise click.ClickException("Circular dependency detected")


def _echo_cycle(files: list[str]) -> None:
    click.echo(click.style("Circular dependency between:", fg="red"), err=True)
    for f in files:
        click.echo(f"  {f}", err=True)


def graph_manifest(graph: Graph) -> dict:
    """JSON-serializable summary of ``graph`` in traversal order."""
    counts = graph.dependent_counts()
    nodes = []
    for node in graph.nodes():
        nodes.append({
            "input": node.input,
            "output": node.output,
            "dependent_count": counts[node.input],
            "dependents": sorted(node.dependents),
            "modules": dict(sorted(node.modules.items())),
            "unresolved": node.unresolved,
        })
    return {
        "version": "1.0",
        "total_nodes": len(nodes),
        "nodes": nodes,
    }


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help=f"Config file (default: ./{CONFIG_FILENAME})")
@click.option("--verbose", "-v", count=True, help="Log more (repeat for debug output)")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: int):
    """teal-build: dependency graph and incremental build planning for Teal."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = config_path


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the graph as JSON")
@click.pass_obj
def graph(config_path: Path | None, as_json: bool):
    """Show source files, most depended-upon first."""
    g = _build(_load(config_path))

    if as_json:
        click.echo(json.dumps(graph_manifest(g), indent=2))
        return

    if not len(g):
        click.echo("No source files found.")
        return

    counts = g.dependent_counts()
    for node in g.nodes():
        click.echo(
            f"{click.style(str(counts[node.input]), fg='yellow'):>14}  "
            f"{click.style(node.input, fg='cyan')}"
        )
        for ref, path in sorted(node.modules.items()):
            click.echo(f"      {ref} -> {path}")
        for ref in node.unresolved:
            click.echo(click.style(f"      {ref} -> (not found)", dim=True))


@cli.command()
@click.pass_obj
def check(config_path: Path | None):
    """Fail on circular requires; warn about unresolved modules."""
    g = _build(_load(config_path))

    unresolved = 0
    for node in g.nodes():
        for ref in node.unresolved:
            unresolved += 1
            click.echo(click.style(f"warning: {node.input}: module '{ref}' not found", fg="yellow"))

    click.echo(f"{len(g)} file(s), no circular dependencies, {unresolved} unresolved module(s)")


def _echo_nodes(title: str, nodes: list[Node], color: str) -> None:
    click.echo(click.style(f"{title} ({len(nodes)}):", fg=color))
    for node in nodes:
        target = f" -> {node.output}" if node.output else ""
        click.echo(f"  {node.input}{target}")


@cli.command()
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False))
@click.option("--force", "-f", is_flag=True, help="Treat every file as changed")
@click.pass_obj
def plan(config_path: Path | None, files: tuple[str, ...], force: bool):
    """List what an incremental build would compile and typecheck.

    FILES, when given, are treated as the changed files.
    """
    config = _load(config_path)
    try:
        result = plan_build(config, list(files) or None, force=force)
    except CycleError as e:
        _echo_cycle(e.files)
        raise click.ClickException("Circular dependency detected")
    except TealBuildError as e:
        raise click.ClickException(str(e))

    if result.is_empty:
        click.echo("Everything is up to date.")
        return

    _echo_nodes("Compile", result.compile, "green")
    _echo_nodes("Typecheck", result.typecheck, "blue")


if __name__ == "__main__":
    cli()
