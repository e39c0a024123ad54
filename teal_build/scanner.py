"""Directory scanning with include/exclude glob rules."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterator

from teal_build import paths

DEFAULT_SKIP_DIRS = [
    ".git", "node_modules", "__pycache__", ".venv", "venv", "lua_modules", ".luarocks",
]


def _match(rel_path: str, pattern: str) -> bool:
    if fnmatch.fnmatch(rel_path, pattern):
        return True
    # "**/x" also matches x at the top level
    while pattern.startswith("**/"):
        pattern = pattern[3:]
        if fnmatch.fnmatch(rel_path, pattern):
            return True
    return False


def matches_any(rel_path: str, patterns: list[str]) -> bool:
    return any(_match(rel_path, p) for p in patterns)


def is_selected(rel_path: str, include: list[str] | None, exclude: list[str] | None) -> bool:
    """Exclude wins over include; an empty include list selects everything."""
    if exclude and matches_any(rel_path, exclude):
        return False
    if include:
        return matches_any(rel_path, include)
    return True


def scan_files(
    directory: str,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    skip_dirs: list[str] | None = None,
) -> Iterator[str]:
    """Yield files under ``directory`` as canonical ``directory``-joined paths."""
    skip = DEFAULT_SKIP_DIRS if skip_dirs is None else skip_dirs
    root = Path(directory)
    for path in sorted(root.rglob("*")):
        if path.is_dir():
            continue
        rel = path.relative_to(root)
        if any(fnmatch.fnmatch(part, pattern) for part in rel.parts[:-1] for pattern in skip):
            continue
        rel_posix = rel.as_posix()
        if is_selected(rel_posix, include, exclude):
            yield paths.join(str(directory), rel_posix)
