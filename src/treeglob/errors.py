"""Exceptions raised by treeglob."""

from __future__ import annotations


class TreeglobError(Exception):
    """Base class for treeglob errors."""


class GlobWalkError(TreeglobError):
    """
    A directory could not be read during a walk with `throw_on_error` set.
    The original `OSError` is kept as `cause` and chained as `__cause__`.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot read directory {path}: {reason}")
        self.path: str = path
        self.cause: OSError = cause
