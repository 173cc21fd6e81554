"""Options controlling a glob match."""

from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


def default_case_sensitive() -> bool:
    """Windows and macOS filesystems are case-insensitive by default."""
    return sys.platform not in ("win32", "darwin")


class OutputMode(str, Enum):
    """How matched paths are reported."""

    relative = "relative"
    absolute = "absolute"
    realpath = "realpath"


@dataclass
class GlobOptions:
    """
    Settings for one `match()` call.

    `base_directory` anchors relative patterns and relative output paths.
    `ignore` rules use gitignore-like syntax with last-match-wins precedence;
    a `!` prefix re-includes a path when `allow_negation` is set. A single
    string is taken as one rule.
    `realpath` takes precedence over `absolute` for the output form.
    """

    base_directory: str | Path = field(default_factory=os.getcwd)
    ignore: list[str] = field(default_factory=list)
    include_directories: bool = False
    follow_symlinks: bool = False
    case_sensitive: bool = field(default_factory=default_case_sensitive)
    allow_negation: bool = True
    expand_braces: bool = True
    absolute: bool = False
    realpath: bool = False
    dot: bool = False
    match_base: bool = False
    throw_on_error: bool = False
    gitignore: bool = False

    @property
    def output_mode(self) -> OutputMode:
        if self.realpath:
            return OutputMode.realpath
        if self.absolute:
            return OutputMode.absolute
        return OutputMode.relative

    def replace(self, **changes: Any) -> GlobOptions:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
