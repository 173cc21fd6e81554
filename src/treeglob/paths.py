"""
Path string helpers shared by the walker and the matcher.

Patterns always use `/` as the separator. On Windows a `\\` in a pattern is
taken as a separator too; elsewhere it escapes the next character.
"""

from __future__ import annotations

import os

from treeglob.options import OutputMode
from treeglob.patterns.segment import MAGIC_CHARS

_WINDOWS = os.sep == "\\"


def has_separator(pattern: str) -> bool:
    return "/" in pattern or (_WINDOWS and "\\" in pattern)


def normalize_pattern(pattern: str) -> str:
    if _WINDOWS:
        return pattern.replace("\\", "/")
    return pattern


def to_posix(path: str) -> str:
    if _WINDOWS:
        return path.replace("\\", "/")
    return path


def is_absolute_pattern(pattern: str) -> bool:
    return os.path.isabs(pattern) or pattern.startswith("/")


def split_segments(pattern: str) -> list[str]:
    """Split on `/`, dropping empty segments from repeated or edge separators."""
    return [part for part in pattern.split("/") if part]


def unescape_literal(text: str) -> str:
    """Remove backslash escapes from a non-magic pattern so it can be used as a path."""
    if _WINDOWS or "\\" not in text:
        return text
    out: list[str] = []
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c == "\\" and i + 1 < n:
            out.append(text[i + 1])
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


def _first_magic_index(pattern: str) -> int:
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\" and not _WINDOWS:
            i += 2
            continue
        if c in MAGIC_CHARS:
            return i
        i += 1
    return -1


def pattern_directory(pattern: str) -> str:
    """
    Return the longest leading directory of `pattern` that holds no magic,
    cut on a `/` boundary. `""` means the pattern starts with magic (or has
    no directory part); `"/"` is the filesystem root.

    >>> pattern_directory("src/**/*.py")
    'src'
    >>> pattern_directory("src/")
    'src'
    """
    first_magic = _first_magic_index(pattern)
    if first_magic == -1:
        cut = pattern.rfind("/")
    else:
        cut = pattern.rfind("/", 0, first_magic)
    if cut == -1:
        return ""
    if cut == 0:
        return "/"
    return pattern[:cut]


def format_result(path: str, base_directory: str, mode: OutputMode, absolute_pattern: bool = False) -> str:
    """
    Render a matched absolute path for output, always with `/` separators.

    Relative output is relative to `base_directory`, except for matches of an
    absolute pattern, which stay absolute.
    """
    if mode is OutputMode.realpath:
        out = os.path.realpath(path)
    elif mode is OutputMode.absolute or absolute_pattern:
        out = os.path.abspath(path)
    else:
        try:
            out = os.path.relpath(path, base_directory)
        except ValueError:
            # Different drives on Windows.
            out = os.path.abspath(path)
    return to_posix(out)
