"""Shell glob matching for module names."""

from __future__ import annotations

import fnmatch

__all__ = ["match_pattern", "translate_glob"]

_SPECIAL = "*?["


def _bracket_end(pattern: str, start: int) -> int:
    """Index of the ']' closing the bracket opened at ``start``, or -1."""
    j = start + 1
    if j < len(pattern) and pattern[j] in "!^":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    return pattern.find("]", j)


def translate_glob(pattern: str) -> str:
    """Rewrite a POSIX ``fnmatch(3)`` pattern into :mod:`fnmatch` syntax.

    ``[^...]`` negates like ``[!...]`` and a backslash makes the next
    character literal. Everything else already has the same meaning.
    """
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\" and i + 1 < n:
            nxt = pattern[i + 1]
            out.append(f"[{nxt}]" if nxt in _SPECIAL else nxt)
            i += 2
        elif c == "[":
            end = _bracket_end(pattern, i)
            if end < 0:
                out.append("[[]")
                i += 1
                continue
            body = pattern[i + 1:end]
            if body.startswith("^"):
                body = "!" + body[1:]
            out.append(f"[{body}]")
            i = end + 1
        else:
            out.append(c)
            i += 1
    return "".join(out)


def match_pattern(pattern: str, module_name: str) -> bool:
    """Match a normalized module name against a shell glob.

    Matching is case sensitive, as with POSIX ``fnmatch(3)`` without flags.

    Args:
        pattern: Glob using ``*``, ``?``, bracket expressions and ``\\`` escapes.
        module_name: Normalized module name from the dependency index.

    Returns:
        True if the whole name matches the pattern.
    """
    return fnmatch.fnmatchcase(module_name, translate_glob(pattern))
