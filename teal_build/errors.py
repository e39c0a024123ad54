"""Exception types shared across teal-build."""

from __future__ import annotations


class TealBuildError(Exception):
    """Base class for errors surfaced to the command line."""


class ParseError(TealBuildError):
    """A source file could not be read or scanned for requires."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(TealBuildError):
    """The project configuration file is malformed."""


class CycleError(TealBuildError):
    """The dependency graph contains a circular require."""

    def __init__(self, files: list[str]):
        super().__init__("Circular dependency detected: " + ", ".join(files))
        self.files = files


class PlanError(TealBuildError):
    """A build plan was requested for files outside the graph."""
