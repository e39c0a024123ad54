"""Module name to file path resolution over a list of search directories."""

from __future__ import annotations

import logging
import os

from teal_build import paths

logger = logging.getLogger(__name__)

SOURCE_PATTERNS = ("?.tl", "?.d.tl", "?/init.tl", "?/init.d.tl")
LUA_PATTERNS = ("?.lua", "?/init.lua")


class ModuleResolver:
    """Resolve ``require`` names the way ``package.path`` templates do."""

    def __init__(self, search_dirs: list[str] | None = None):
        self.search_dirs = [paths.canonicalize(d) for d in (search_dirs or ["."])]

    def candidates(self, module_ref: str, prefer_source: bool = True) -> list[str]:
        stem = module_ref.replace(".", "/")
        patterns = SOURCE_PATTERNS + LUA_PATTERNS if prefer_source else LUA_PATTERNS + SOURCE_PATTERNS
        return [
            paths.join(directory, pattern.replace("?", stem))
            for directory in self.search_dirs
            for pattern in patterns
        ]

    def resolve(self, module_ref: str, prefer_source: bool = True) -> str | None:
        """First existing candidate for ``module_ref``, or None."""
        if not module_ref or module_ref.startswith(".") or module_ref.endswith("."):
            return None
        for candidate in self.candidates(module_ref, prefer_source):
            if os.path.isfile(candidate):
                return candidate
        logger.debug("module %r not found in %s", module_ref, self.search_dirs)
        return None
