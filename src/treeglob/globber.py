"""
Globber: main entry point for matching a glob pattern against the filesystem.

Expands braces, anchors each concrete pattern at its longest literal directory
prefix, walks from there, and yields deduplicated results lazily.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import Any

from treeglob.options import GlobOptions
from treeglob.paths import (
    format_result,
    has_separator,
    is_absolute_pattern,
    normalize_pattern,
    pattern_directory,
    split_segments,
    unescape_literal,
)
from treeglob.patterns.braces import expand_braces
from treeglob.patterns.segment import compile_segment, has_magic
from treeglob.walking.gitignore import GitignoreChain
from treeglob.walking.ignore_filter import IgnoreFilter
from treeglob.walking.walker import GlobWalker

log = logging.getLogger(__name__)


class Globber:
    """
    Matches glob patterns with a fixed set of `GlobOptions`.

    Each call to `iter_matches()` is an independent walk: directory listings
    are read fresh and nothing but the compiled-segment cache outlives it.
    """

    def __init__(self, options: GlobOptions | None = None) -> None:
        self.options: GlobOptions = options if options is not None else GlobOptions()

    def iter_matches(self, pattern: str | None) -> Iterator[str]:
        """
        Lazily yield the paths matching `pattern`.

        `None` or a blank pattern yields nothing. Any other non-string raises
        `TypeError` right away, before iteration starts.
        """
        if pattern is None:
            return iter(())
        if not isinstance(pattern, str):
            raise TypeError(f"pattern must be a string, not {type(pattern).__name__}")
        if not pattern.strip():
            return iter(())
        return self._iter_matches(pattern)

    def _iter_matches(self, pattern: str) -> Iterator[str]:
        options = self.options
        base = os.path.abspath(options.base_directory)
        ignore = IgnoreFilter.build(options.ignore, options.allow_negation, options.case_sensitive)
        patterns = expand_braces(pattern) if options.expand_braces else [pattern]
        if len(patterns) > 1:
            log.debug("Expanded %r into %d patterns", pattern, len(patterns))

        seen: set[str] = set()
        for concrete in patterns:
            absolute_pattern = is_absolute_pattern(normalize_pattern(concrete))
            for path in self._match_one(concrete, base, ignore):
                result = format_result(path, base, options.output_mode, absolute_pattern)
                key = result if options.case_sensitive else result.casefold()
                if key in seen:
                    continue
                seen.add(key)
                yield result

    def match(self, pattern: str | None) -> list[str]:
        return list(self.iter_matches(pattern))

    def _walker(self, root: str, ignore: IgnoreFilter) -> GlobWalker:
        gitignore = GitignoreChain(root) if self.options.gitignore else None
        return GlobWalker(root, self.options, ignore, gitignore)

    def _literal_kept(self, target: str, ignore: IgnoreFilter, is_dir: bool) -> bool:
        # A literal target is judged relative to its own parent directory.
        name = os.path.basename(target.rstrip("/\\"))
        if ignore.is_ignored(name):
            return False
        if self.options.gitignore:
            return not GitignoreChain(os.path.dirname(target)).is_ignored(name, is_dir)
        return True

    def _match_one(self, pattern: str, base: str, ignore: IgnoreFilter) -> Iterator[str]:
        options = self.options
        basename_only = not has_separator(pattern)
        pattern = normalize_pattern(pattern)

        if options.match_base and basename_only:
            matcher = compile_segment(pattern, options.case_sensitive, options.dot)
            yield from self._walker(base, ignore).walk_basename(matcher)
            return

        anchor = pattern_directory(pattern)
        root = os.path.normpath(os.path.join(base, unescape_literal(anchor)))
        remainder = pattern[len(anchor) :].lstrip("/")
        directory_only = pattern.endswith("/")

        if not remainder:
            # The whole pattern names a directory, e.g. `src/`.
            if os.path.isdir(root) and self._literal_kept(root, ignore, True):
                yield root
            return

        if not has_magic(remainder):
            target = os.path.join(root, unescape_literal(remainder.rstrip("/")))
            if directory_only:
                exists = os.path.isdir(target)
            else:
                exists = os.path.exists(target)
            if exists and self._literal_kept(target, ignore, os.path.isdir(target)):
                yield target
            return

        yield from self._walker(root, ignore).walk(split_segments(remainder), directory_only)


def match(pattern: str | None, options: GlobOptions | None = None, **overrides: Any) -> Iterator[str]:
    """
    Lazily yield paths matching `pattern`.

    Keyword overrides are applied on top of `options` (or the defaults), e.g.
    `match("**/*.py", dot=True, ignore=["build/"])`.
    """
    options = options if options is not None else GlobOptions()
    if overrides:
        options = options.replace(**overrides)
    return Globber(options).iter_matches(pattern)


def glob(pattern: str | None, options: GlobOptions | None = None, **overrides: Any) -> list[str]:
    """Like `match()`, but returns all results as a list."""
    return list(match(pattern, options, **overrides))
