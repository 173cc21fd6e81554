"""Glob pattern compilation: per-segment matchers and brace expansion."""

from treeglob.patterns.braces import expand_braces, has_braces
from treeglob.patterns.segment import (
    GLOBSTAR,
    SegmentMatcher,
    compile_segment,
    has_magic,
    translate_segment,
)

__all__ = [
    "GLOBSTAR",
    "SegmentMatcher",
    "compile_segment",
    "expand_braces",
    "has_braces",
    "has_magic",
    "translate_segment",
]
