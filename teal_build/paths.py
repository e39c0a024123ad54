"""Path string helpers.

Graph nodes are keyed by the canonical form of a path, so ``canonicalize``
must be idempotent: feeding its output back in returns the same string.
"""

from __future__ import annotations

import os
import posixpath

SOURCE_EXT = ".tl"
DECLARATION_SUFFIX = ".d.tl"


def _to_posix(path: str) -> str:
    return str(path).replace("\\", "/")


def is_absolute(path: str) -> bool:
    p = str(path)
    return os.path.isabs(p) or posixpath.isabs(_to_posix(p))


def canonicalize(path: str) -> str:
    """Normalize separators, collapse ``.``/``..`` and drop trailing slashes."""
    return posixpath.normpath(_to_posix(path))


def join(*parts: str) -> str:
    return canonicalize(posixpath.join(*(_to_posix(p) for p in parts)))


def is_inside(path: str, directory: str) -> bool:
    """True when ``path`` lies within ``directory`` (or is the directory)."""
    p = os.path.abspath(path)
    d = os.path.abspath(directory)
    try:
        return os.path.commonpath([p, d]) == d
    except ValueError:
        # different drives
        return False


def relative_to(path: str, directory: str) -> str:
    return canonicalize(os.path.relpath(os.path.abspath(path), os.path.abspath(directory)))


def extension_of(path: str) -> str:
    return posixpath.splitext(_to_posix(path))[1]


def is_declaration(path: str) -> bool:
    return _to_posix(path).endswith(DECLARATION_SUFFIX)


def with_extension(path: str, ext: str) -> str:
    """Swap the source extension of ``path`` for ``ext``."""
    p = canonicalize(path)
    if p.endswith(DECLARATION_SUFFIX):
        return p[: -len(DECLARATION_SUFFIX)] + ext
    return posixpath.splitext(p)[0] + ext
