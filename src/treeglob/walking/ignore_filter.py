"""
Ignore rules with gitignore-like, last-match-wins precedence.

A rule without a `/` matches the basename of a path at any depth. A rule with
a `/` matches the whole path relative to the walk root, segment by segment,
where `**` spans zero or more directory levels and a trailing `/` or `/**`
covers the named directory and everything below it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from treeglob.options import default_case_sensitive
from treeglob.paths import normalize_pattern
from treeglob.patterns.segment import GLOBSTAR, atomic_run, translate_segment

# One whole directory level, and any number of them.
_LEVEL = "[^/]+/"
_LEVELS = f"(?:{_LEVEL})*"


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    regex: re.Pattern[str]
    negated: bool
    full_path: bool

    def matches(self, relative_path: str, basename: str) -> bool:
        target = relative_path if self.full_path else basename
        return self.regex.fullmatch(target) is not None


def _path_rule_regex(rule: str) -> str | None:
    rule = rule.lstrip("/")
    covers_subtree = False
    while True:
        if rule.endswith("/"):
            rule = rule.rstrip("/")
            covers_subtree = True
        elif rule.endswith("/" + GLOBSTAR):
            rule = rule[: -len(GLOBSTAR) - 1]
            covers_subtree = True
        else:
            break

    segments: list[str] = []
    for segment in rule.split("/"):
        # Runs of `**` span the same levels as a single one.
        if segment and not (segment == GLOBSTAR and segments and segments[-1] == GLOBSTAR):
            segments.append(segment)
    if not segments:
        return None
    if segments == [GLOBSTAR]:
        return ".*"

    # Each `**` is followed by the fixed levels up to the next `**`.
    prefix: list[str] = []
    runs: list[list[str]] = []
    last = len(segments) - 1
    for i, segment in enumerate(segments):
        if segment == GLOBSTAR:
            runs.append([])
            continue
        piece = translate_segment(segment, dot=False) + ("/" if i != last else "")
        (runs[-1] if runs else prefix).append(piece)

    parts = ["".join(prefix)]
    for i, run in enumerate(runs):
        fixed = "".join(run)
        if i == len(runs) - 1:
            parts.append(_LEVELS + fixed)
        else:
            parts.append(atomic_run(_LEVEL, fixed))

    if covers_subtree:
        parts.append("(?:/.*)?")
    return "".join(parts)


def _compile_rule(raw: str, allow_negation: bool, case_sensitive: bool) -> IgnoreRule | None:
    text = raw.strip()
    if not text:
        return None
    negated = allow_negation and text.startswith("!")
    if negated:
        text = text[1:]
    text = normalize_pattern(text)
    if not text:
        return None

    full_path = "/" in text
    if full_path:
        source = _path_rule_regex(text)
        if source is None:
            return None
    else:
        source = translate_segment(text, dot=False)

    flags = re.DOTALL
    if not case_sensitive:
        flags |= re.IGNORECASE
    return IgnoreRule(raw, re.compile(source, flags), negated, full_path)


class IgnoreFilter:
    """
    Decides whether a path relative to the walk root is ignored.

    Rules are evaluated in order and the last one that matches decides.
    Paths that match no rule are kept. The root itself (`""` or `.`) and
    paths escaping it (`../...`) are never ignored.
    """

    def __init__(self, rules: Iterable[IgnoreRule] = ()) -> None:
        self.rules: tuple[IgnoreRule, ...] = tuple(rules)

    @classmethod
    def build(
        cls,
        rules: Iterable[str] | None,
        allow_negation: bool = True,
        case_sensitive: bool | None = None,
    ) -> IgnoreFilter:
        """Compile raw rule strings, skipping blank ones. A single string is one rule."""
        if case_sensitive is None:
            case_sensitive = default_case_sensitive()
        if isinstance(rules, str):
            rules = [rules]
        compiled = [_compile_rule(raw, allow_negation, case_sensitive) for raw in rules or ()]
        return cls(rule for rule in compiled if rule is not None)

    def __bool__(self) -> bool:
        return bool(self.rules)

    def __repr__(self) -> str:
        return f"IgnoreFilter({[rule.pattern for rule in self.rules]!r})"

    def is_ignored(self, relative_path: str) -> bool:
        if not self.rules:
            return False
        path = normalize_pattern(relative_path).rstrip("/")
        while path.startswith("./"):
            path = path[2:]
        if not path or path in (".", "..") or path.startswith("../"):
            return False

        basename = path.rsplit("/", 1)[-1]
        ignored = False
        for rule in self.rules:
            if rule.matches(path, basename):
                ignored = not rule.negated
        return ignored
