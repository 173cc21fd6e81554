"""
Brace expansion: `src/{a,b}/*.py` becomes `src/a/*.py` and `src/b/*.py`.

Groups nest (`{a,{b,c}}`), and `\\{`, `\\}` and `\\,` are never structural.
A brace pair without a top-level comma is not a group and is kept literally,
except that a pair holding an escaped comma (`{a\\,b}`) is a one-option group.
"""

from __future__ import annotations


def _unescape_braces(text: str) -> str:
    """Resolve `\\{`, `\\}` and `\\,`, leaving every other escape for the segment compiler."""
    out: list[str] = []
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c == "\\" and i + 1 < n:
            nxt = text[i + 1]
            if nxt in "{},":
                out.append(nxt)
            else:
                out.append(c + nxt)
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


def _has_escaped_comma(body: str) -> bool:
    i, n = 0, len(body)
    while i < n:
        if body[i] == "\\":
            if i + 1 < n and body[i + 1] == ",":
                return True
            i += 2
            continue
        i += 1
    return False


def _split_top_level(body: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    last = 0
    i, n = 0, len(body)
    while i < n:
        c = body[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        elif c == "," and depth == 0:
            parts.append(body[last:i])
            last = i + 1
        i += 1
    parts.append(body[last:])
    return parts


def _expand_into(pattern: str, results: list[str]) -> None:
    first = -1
    depth = 0
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            if depth == 0:
                first = i
            depth += 1
        elif c == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                prefix = pattern[:first]
                body = pattern[first + 1 : i]
                suffix = pattern[i + 1 :]
                options = _split_top_level(body)
                if len(options) == 1:
                    if _has_escaped_comma(body):
                        # `{a\,b}` is a one-option group: drop the braces, keep the comma.
                        _expand_into(prefix + body + suffix, results)
                    else:
                        results.append(_unescape_braces(pattern))
                    return
                for option in options:
                    _expand_into(prefix + option + suffix, results)
                return
        i += 1
    results.append(_unescape_braces(pattern))


def expand_braces(pattern: str) -> list[str]:
    """
    Expand every brace group in `pattern`, depth-first and in order.

    Always returns at least one string: `[pattern]` (unescaped) when there is
    nothing to expand.
    """
    results: list[str] = []
    _expand_into(pattern, results)
    return results


def has_braces(pattern: str) -> bool:
    """True if `pattern` contains an unescaped `{`."""
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "\\":
            i += 2
            continue
        if pattern[i] == "{":
            return True
        i += 1
    return False
