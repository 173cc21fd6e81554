"""
Filesystem traversal for glob patterns: the walker and the filters it applies.

No imports from `treeglob` outside `patterns`, `options`, `paths` and `errors`.
"""

from treeglob.walking.gitignore import GitignoreChain, load_gitignore
from treeglob.walking.ignore_filter import IgnoreFilter, IgnoreRule
from treeglob.walking.walker import Entry, GlobWalker

__all__ = [
    "Entry",
    "GitignoreChain",
    "GlobWalker",
    "IgnoreFilter",
    "IgnoreRule",
    "load_gitignore",
]
