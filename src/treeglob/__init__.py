"""
Shell-style glob matching against a real filesystem, with brace expansion,
globstar, symlink cycle detection, and gitignore-like ignore rules.

Usage::

    from treeglob import GlobOptions, match

    for path in match("src/**/*.{py,pyi}", ignore=["build/", "*.log", "!keep.log"]):
        print(path)

    options = GlobOptions(base_directory="docs", dot=True, absolute=True)
    pages = list(match("**/*.md", options))
"""

from treeglob.errors import GlobWalkError, TreeglobError
from treeglob.globber import Globber, glob, match
from treeglob.options import GlobOptions, OutputMode
from treeglob.patterns import compile_segment, expand_braces
from treeglob.walking import IgnoreFilter

__all__ = [
    "GlobOptions",
    "GlobWalkError",
    "Globber",
    "IgnoreFilter",
    "OutputMode",
    "TreeglobError",
    "compile_segment",
    "expand_braces",
    "glob",
    "match",
]
