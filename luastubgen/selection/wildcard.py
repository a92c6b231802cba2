"""Glob-style matching of qualified type names (``*``, ``Ns.*``, exact)."""

from __future__ import annotations

from typing import Optional


def matches(name: Optional[str], pattern: Optional[str]) -> bool:
    """Return True when ``name`` matches ``pattern``.

    ``*`` matches any run of characters. Literal tokens between stars must
    appear in order without overlapping; the first token is anchored at the
    start unless the pattern begins with ``*`` and the last token is anchored
    at the end unless the pattern ends with ``*``.
    """
    if pattern is None:
        return name is None
    if name is None:
        return False
    if not pattern:
        return not name
    if "*" not in pattern:
        return name == pattern

    tokens = [token for token in pattern.split("*") if token]
    anchored_start = not pattern.startswith("*")
    anchored_end = not pattern.endswith("*")

    cursor = 0
    last = len(tokens) - 1
    for index, token in enumerate(tokens):
        if index == 0 and anchored_start:
            if not name.startswith(token):
                return False
            cursor = len(token)
            continue
        if index == last and anchored_end:
            start = len(name) - len(token)
            return start >= cursor and name.endswith(token)
        found = name.find(token, cursor)
        if found < 0:
            return False
        cursor = found + len(token)
    return True


__all__ = ["matches"]
