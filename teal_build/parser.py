"""Require scanner for Teal sources.

This is not a Teal parser. It only tokenizes comments and string literals
well enough to find ``require`` calls and to reject files whose comments
or strings are left open.
"""

from __future__ import annotations

import re
from pathlib import Path

from teal_build.errors import ParseError

_SPECIAL_RE = re.compile(r"--|[\"']|\[=*\[")
_LONG_OPEN_RE = re.compile(r"\[(=*)\[")
_REQUIRE_RE = re.compile(r"(?<![\w.:])require\s*(?:\(\s*)?\x00(\d+)\x00")


def _close_long_bracket(source: str, start: int, level: str, path: str, what: str) -> int:
    closing = "]" + level + "]"
    end = source.find(closing, start)
    if end < 0:
        raise ParseError(path, f"unterminated long {what}")
    return end + len(closing)


def _read_quoted(source: str, start: int, quote: str, path: str) -> tuple[str, int]:
    i = start
    chars: list[str] = []
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            chars.append(source[i:i + 2])
            i += 2
            continue
        if ch == quote:
            return "".join(chars), i + 1
        if ch == "\n":
            break
        chars.append(ch)
        i += 1
    line = source.count("\n", 0, start) + 1
    raise ParseError(path, f"unterminated string on line {line}")


def _tokenize(source: str, path: str) -> tuple[str, list[str]]:
    """Return (code with strings replaced by placeholders, string values)."""
    out: list[str] = []
    strings: list[str] = []
    pos = 0
    while True:
        m = _SPECIAL_RE.search(source, pos)
        if not m:
            out.append(source[pos:])
            break
        out.append(source[pos:m.start()])
        token = m.group(0)

        if token == "--":
            long_open = _LONG_OPEN_RE.match(source, m.end())
            if long_open:
                pos = _close_long_bracket(
                    source, long_open.end(), long_open.group(1), path, "comment",
                )
            else:
                newline = source.find("\n", m.end())
                pos = len(source) if newline < 0 else newline
            out.append(" ")
            continue

        if token in ("\"", "'"):
            value, pos = _read_quoted(source, m.end(), token, path)
        else:
            level = token[1:-1]
            end = _close_long_bracket(source, m.end(), level, path, "string")
            value = source[m.end():end - len(level) - 2]
            pos = end

        out.append(f"\x00{len(strings)}\x00")
        strings.append(value)

    return "".join(out), strings


def scan_requires(source: str, path: str = "<string>") -> list[str]:
    """Module references required by ``source``, in first-seen order."""
    code, strings = _tokenize(source, path)
    refs: list[str] = []
    for m in _REQUIRE_RE.finditer(code):
        name = strings[int(m.group(1))].strip()
        if name and name not in refs:
            refs.append(name)
    return refs


def parse_requires(path: str) -> list[str]:
    """Read ``path`` and return its module references.

    Raises ParseError when the file is unreadable or malformed.
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(str(path), str(e)) from e
    return scan_requires(source, str(path))
