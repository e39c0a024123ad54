"""In-memory collaborators and on-disk project builders for tests."""

from pathlib import Path

from teal_build.errors import ParseError
from teal_build.graph import Graph


class FakeParser:
    """Maps file path -> list of requires; missing or ``None`` entries fail to parse."""

    def __init__(self, sources: dict[str, list[str] | None]):
        self.sources = sources
        self.calls: list[str] = []

    def __call__(self, path: str) -> list[str]:
        self.calls.append(path)
        requires = self.sources.get(path)
        if requires is None:
            raise ParseError(path, "syntax error")
        return list(requires)


class FakeResolver:
    """Maps module ref -> path for refs listed in ``modules``."""

    def __init__(self, modules: dict[str, str]):
        self.modules = modules

    def resolve(self, module_ref: str, prefer_source: bool = True) -> str | None:
        return self.modules.get(module_ref)


def make_graph(sources: dict[str, list[str] | None], modules: dict[str, str] | None = None):
    """Graph over fake files; by default module ``x`` resolves to ``x.tl``."""
    if modules is None:
        modules = {p[:-3]: p for p in sources if p.endswith(".tl")}
    return Graph.empty(resolver=FakeResolver(modules), parser=FakeParser(sources))


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
