"""teal-build: dependency graph and incremental build planning for Teal projects."""

__version__ = "0.1.0"
