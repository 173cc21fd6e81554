"""
Compile a single path segment of a glob pattern into a name matcher.

A segment is one `/`-free piece of a pattern, such as `*.py` or `test_[!a-c]?`.
The compiled `SegmentMatcher` answers whether a directory entry name matches it.

Supported syntax: `*`, `?`, `[...]` classes (with `!`/`^` negation and ranges),
and backslash escapes. Anything else matches literally. Compilation never fails:
malformed brackets fall back to a literal `[`.
"""

from __future__ import annotations

import functools
import itertools
import re
from dataclasses import dataclass

# Characters that make a pattern "magic" (not a plain literal path).
MAGIC_CHARS = frozenset("*?[{")

GLOBSTAR = "**"

# Marker for a run of `*` in the token stream.
_STAR = object()

# Group names must be unique within one regex, and full-path ignore rules join
# several segment translations into a single regex.
_next_group_id = itertools.count().__next__


def has_magic(text: str) -> bool:
    """True if `text` contains an unescaped `*`, `?`, `[` or `{`."""
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c in MAGIC_CHARS:
            return True
        i += 1
    return False


def _translate_class(segment: str, start: int) -> tuple[str | None, int]:
    """
    Translate a bracket expression whose `[` sits just before `start`.

    Returns the regex fragment and the index just past the closing `]`, or
    `(None, start)` if the bracket is never closed.
    """
    n = len(segment)
    j = start
    negated = False
    if j < n and segment[j] in "!^":
        negated = True
        j += 1

    chars: list[str] = []
    items: list[str] = []
    if j < n and segment[j] == "]":
        chars.append("]")
        j += 1

    while j < n and segment[j] != "]":
        c = segment[j]
        if c == "\\":
            if j + 1 < n:
                j += 1
                c = segment[j]
            chars.append(c)
        elif c == "-" and chars and j + 1 < n and segment[j + 1] != "]":
            lo = chars.pop()
            j += 1
            hi = segment[j]
            if hi == "\\" and j + 1 < n:
                j += 1
                hi = segment[j]
            # An empty range like `z-a` contributes nothing.
            if lo <= hi:
                items.append(f"{re.escape(lo)}-{re.escape(hi)}")
        else:
            chars.append(c)
        j += 1

    if j >= n:
        return None, start

    items.extend(re.escape(c) for c in chars)
    body = "".join(items)
    if negated:
        return f"[^/{body}]", j + 1
    if not body:
        return "(?!)", j + 1
    return f"[{body}]", j + 1


def _tokenize(segment: str) -> list[object]:
    tokens: list[object] = []
    i, n = 0, len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c == "*":
            if not tokens or tokens[-1] is not _STAR:
                tokens.append(_STAR)
        elif c == "?":
            tokens.append("[^/]")
        elif c == "[":
            fragment, end = _translate_class(segment, i)
            if fragment is None:
                tokens.append(re.escape("["))
            else:
                tokens.append(fragment)
                i = end
        elif c == "\\":
            if i < n:
                tokens.append(re.escape(segment[i]))
                i += 1
            else:
                tokens.append(re.escape("\\"))
        else:
            tokens.append(re.escape(c))
    return tokens


def atomic_run(unit: str, fixed: str) -> str:
    """
    Regex for a lazy run of `unit` followed by `fixed`, emulating an atomic
    group: once `fixed` has matched after the shortest run, the run is never
    retried at another length.
    """
    group = f"g{_next_group_id()}"
    return f"(?=(?P<{group}>(?:{unit})*?{fixed}))(?P={group})"


def _join_tokens(tokens: list[object]) -> str:
    """
    Join translated tokens, emitting each inner `*` as an emulated atomic group.

    A `*` followed by more fixed text consumes the shortest run that lets the
    fixed text match, and never gives it back. This keeps evaluation of one
    name linear in the name length for any number of stars.
    """
    res: list[str] = []
    i, n = 0, len(tokens)
    while i < n and tokens[i] is not _STAR:
        res.append(str(tokens[i]))
        i += 1
    while i < n:
        i += 1
        if i == n:
            res.append("[^/]*")
            break
        fixed: list[str] = []
        while i < n and tokens[i] is not _STAR:
            fixed.append(str(tokens[i]))
            i += 1
        fixed_re = "".join(fixed)
        if i == n:
            res.append("[^/]*")
            res.append(fixed_re)
        else:
            res.append(atomic_run("[^/]", fixed_re))
    return "".join(res)


def translate_segment(segment: str, dot: bool = False) -> str:
    """
    Translate a glob segment into an unanchored regex body.

    Unless `dot` is set or the segment starts with a literal `.`, the body
    begins with a lookahead that rejects names starting with `.`.
    """
    body = _join_tokens(_tokenize(segment))
    if not dot and not segment.startswith("."):
        return r"(?!\.)" + body
    return body


@dataclass(frozen=True)
class SegmentMatcher:
    """A compiled, immutable predicate over single file or directory names."""

    pattern: str
    regex: re.Pattern[str]

    def test(self, name: str) -> bool:
        return self.regex.fullmatch(name) is not None


@functools.lru_cache(maxsize=512)
def compile_segment(segment: str, case_sensitive: bool = True, dot: bool = False) -> SegmentMatcher:
    """
    Compile `segment` into a `SegmentMatcher`.

    Results are memoized per `(segment, case_sensitive, dot)`; matchers are
    immutable so the cache can be shared or cleared freely.
    """
    flags = re.DOTALL
    if not case_sensitive:
        flags |= re.IGNORECASE
    return SegmentMatcher(segment, re.compile(translate_segment(segment, dot), flags))
