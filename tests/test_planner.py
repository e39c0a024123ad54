"""Tests for incremental build planning."""

import os

import pytest

from teal_build.config import BuildConfig
from teal_build.errors import CycleError, PlanError
from teal_build.graph import Mark
from teal_build.planner import build_graph, needs_compile, output_path, plan_build

from helpers import write_files

SOURCES = {
    "src/main.tl": 'local util = require("util")\nlocal lfs = require("lfs")\n',
    "src/util.tl": 'local types = require("types")\n',
    "src/types.d.tl": "",
}


def _inputs(nodes):
    return [n.input for n in nodes]


def _set_mtime(path, when):
    os.utime(path, (when, when))


def _build_all(project, config, when=1_000_000):
    """Create up-to-date outputs for every source."""
    for rel in SOURCES:
        _set_mtime(project / rel, when)
        out = output_path(config, rel)
        if out:
            (project / out).parent.mkdir(parents=True, exist_ok=True)
            (project / out).write_text("-- generated\n")
            _set_mtime(project / out, when + 10)


@pytest.fixture
def config(project):
    write_files(project, SOURCES)
    return BuildConfig(source_dir="src", build_dir="build")


class TestOutputPath:
    def test_build_dir_mirrors_tree(self):
        config = BuildConfig(source_dir="src", build_dir="build")
        assert output_path(config, "src/a/b.tl") == "build/a/b.lua"

    def test_beside_source_without_build_dir(self):
        assert output_path(BuildConfig(), "src/a.tl") == "src/a.lua"

    def test_declaration_has_no_output(self):
        assert output_path(BuildConfig(), "src/types.d.tl") is None

    def test_outside_source_dir_stays_beside_source(self):
        config = BuildConfig(source_dir="src", build_dir="build")
        assert output_path(config, "other/x.tl") == "other/x.lua"


def test_build_graph_assigns_outputs(config):
    graph = build_graph(config)
    assert graph.find("src/main.tl").output == "build/main.lua"
    assert graph.find("src/types.d.tl").output is None
    assert graph.find("src/main.tl").unresolved == ["lfs"]


def test_build_graph_from_files(config):
    graph = build_graph(config, ["src/util.tl"])
    assert {n.input for n in graph} == {"src/util.tl", "src/types.d.tl"}


def test_absolute_source_dir(config, project):
    config.source_dir = str(project / "src")
    graph = build_graph(config)
    assert len(graph) == 3


def test_first_build_compiles_everything(config):
    plan = plan_build(config)
    assert set(_inputs(plan.compile)) == {"src/main.tl", "src/util.tl"}
    # declarations have no output to refresh
    assert plan.typecheck == []
    assert plan.graph.find("src/types.d.tl").mark == Mark.UNSET


def test_up_to_date(config, project):
    _build_all(project, config)
    plan = plan_build(config)
    assert plan.is_empty


def test_changed_dependency(config, project):
    _build_all(project, config)
    _set_mtime(project / "src/util.tl", 2_000_000)
    plan = plan_build(config)
    assert _inputs(plan.compile) == ["src/util.tl"]
    assert _inputs(plan.typecheck) == ["src/main.tl"]


def test_named_files(config, project):
    _build_all(project, config)
    plan = plan_build(config, files=["./src/util.tl"])
    assert _inputs(plan.compile) == ["src/util.tl"]
    assert _inputs(plan.typecheck) == ["src/main.tl"]


def test_force(config, project):
    _build_all(project, config)
    plan = plan_build(config, force=True)
    assert _inputs(plan.compile) == ["src/types.d.tl", "src/util.tl", "src/main.tl"]
    assert plan.graph.find("src/main.tl").mark == Mark.COMPILE


def test_unresolved_collected(config):
    plan = plan_build(config)
    assert plan.unresolved == {"src/main.tl": ["lfs"]}


def test_needs_compile_missing_output(config):
    graph = build_graph(config)
    assert needs_compile(graph.find("src/main.tl"))
    assert not needs_compile(graph.find("src/types.d.tl"))
    assert not needs_compile(graph.find("src/types.d.tl"), graph)


def test_cycle_raises(project):
    write_files(project, {"a.tl": 'require("b")', "b.tl": 'require("a")'})
    with pytest.raises(CycleError) as exc:
        plan_build(BuildConfig())
    assert exc.value.files == ["a.tl", "b.tl"]


def test_changed_declaration_retypechecks_dependents(config, project):
    _build_all(project, config)
    _set_mtime(project / "src/types.d.tl", 2_000_000)
    plan = plan_build(config)
    assert _inputs(plan.compile) == ["src/types.d.tl"]
    assert _inputs(plan.typecheck) == ["src/util.tl", "src/main.tl"]


def test_declaration_older_than_dependent_outputs(config, project):
    _build_all(project, config)
    graph = build_graph(config)
    assert not needs_compile(graph.find("src/types.d.tl"), graph)


def test_unknown_named_file(config, project):
    with pytest.raises(PlanError, match="src/typo.tl"):
        plan_build(config, files=["src/util.tl", "src/typo.tl"])


def test_force_with_named_files(config, project):
    _build_all(project, config)
    plan = plan_build(config, files=["src/util.tl"], force=True)
    assert _inputs(plan.compile) == ["src/types.d.tl", "src/util.tl", "src/main.tl"]
    assert plan.typecheck == []
