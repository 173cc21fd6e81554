"""Optional `.gitignore` support for walks, using pathspec."""

from __future__ import annotations

from pathlib import Path

import pathspec

GITIGNORE_FILE = ".gitignore"


def _read_ignore_file(path: Path) -> list[str] | None:
    """
    Read the non-blank, non-comment lines of an ignore file. Returns `None`
    if the file is missing, unreadable, not UTF-8, or has no rules.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    lines = [line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")]
    return lines or None


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """
    Read `.gitignore` in the given directory and return a compiled `PathSpec`,
    or `None` if there is nothing to apply.
    """
    lines = _read_ignore_file(directory / GITIGNORE_FILE)
    if lines is None:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


class GitignoreChain:
    """
    Applies every `.gitignore` between a walk root and a path's parent.

    Each file's rules are matched against the path relative to the directory
    holding that file, as git does. Specs are cached per directory for the
    lifetime of the chain (one match call).
    """

    def __init__(self, root: str | Path) -> None:
        self._root: Path = Path(root)
        self._cache: dict[Path, pathspec.PathSpec | None] = {}

    def _get(self, directory: Path) -> pathspec.PathSpec | None:
        if directory not in self._cache:
            self._cache[directory] = load_gitignore(directory)
        return self._cache[directory]

    def is_ignored(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check a `/`-separated path relative to the root."""
        parts = [p for p in relative_path.split("/") if p and p != "."]
        if not parts:
            return False
        suffix = "/" if is_dir else ""
        current = self._root
        for i, part in enumerate(parts):
            path_spec = self._get(current)
            if path_spec is not None and path_spec.match_file("/".join(parts[i:]) + suffix):
                return True
            current = current / part
        return False
