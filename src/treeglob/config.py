"""
TOML-based config file loading for treeglob.

Searches for `.treeglob.toml`, `treeglob.toml`, or `pyproject.toml [tool.treeglob]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class TreeglobConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # Matching
    dot: bool | None = None
    match_base: bool | None = None
    case_sensitive: bool | None = None
    expand_braces: bool | None = None
    follow_symlinks: bool | None = None
    include_directories: bool | None = None
    throw_on_error: bool | None = None
    # Ignoring
    ignore: list[str] | None = None
    allow_negation: bool | None = None
    gitignore: bool | None = None
    # Output
    absolute: bool | None = None
    realpath: bool | None = None


# Config file search order (first match wins within each directory level)
_PYPROJECT = "pyproject.toml"
_CONFIG_FILENAMES = [".treeglob.toml", "treeglob.toml", _PYPROJECT]

# TOML keys whose snake_case form is not simply the kebab key with `_`.
_KEBAB_TO_SNAKE: dict[str, str] = {
    "include-dirs": "include_directories",
    "strict": "throw_on_error",
    "negation": "allow_negation",
    "braces": "expand_braces",
}

_VALID_FIELDS = {f.name for f in fields(TreeglobConfig)}


def _read_toml(path: Path) -> dict[str, Any] | None:
    """Parse a TOML file, or return `None` (with a warning) if it is malformed."""
    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            log.warning("Ignoring malformed config file %s: %s", path, e)
            return None


def _tool_table(data: dict[str, Any]) -> dict[str, Any] | None:
    tool = data.get("tool")
    if not isinstance(tool, dict):
        return None
    table = cast(dict[str, Any], tool).get("treeglob")
    return cast(dict[str, Any], table) if isinstance(table, dict) else None


def _config_in(directory: Path) -> Path | None:
    for filename in _CONFIG_FILENAMES:
        candidate = directory / filename
        if not candidate.is_file():
            continue
        if filename != _PYPROJECT:
            return candidate
        # A pyproject.toml only counts when it has a [tool.treeglob] table.
        try:
            data = tomllib.loads(candidate.read_text())
        except (tomllib.TOMLDecodeError, OSError):
            continue
        if _tool_table(data) is not None:
            return candidate
    return None


def find_config_file(start_dir: Path) -> Path | None:
    """
    Return the nearest config file at or above `start_dir`, or `None`.
    Within one directory `.treeglob.toml` wins over `treeglob.toml`, which
    wins over a `pyproject.toml` holding `[tool.treeglob]`.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        found = _config_in(directory)
        if found is not None:
            return found
    return None


def load_config(config_path: Path) -> TreeglobConfig:
    """
    Load settings from a standalone config file or from the `[tool.treeglob]`
    table of a pyproject.toml. A malformed file gives an empty config.
    Raises `OSError` if the file cannot be read.
    """
    data = _read_toml(config_path)
    if data is None:
        return TreeglobConfig()
    if config_path.name == _PYPROJECT:
        data = _tool_table(data) or {}
    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> TreeglobConfig:
    """Parse a flat or sectioned TOML dict into TreeglobConfig."""
    # Flatten sections: [matching], [ignore] and [output] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            log.warning("Ignoring unrecognized config key: %s", key)

    ignore = mapped.get("ignore")
    if isinstance(ignore, str):
        mapped["ignore"] = [ignore]
    elif ignore is not None and not (
        isinstance(ignore, list) and all(isinstance(rule, str) for rule in cast(list[Any], ignore))
    ):
        log.warning("Ignoring config key ignore: expected a string or a list of strings")
        del mapped["ignore"]

    return TreeglobConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: TreeglobConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    `ignore` is additive: config rules come first, then CLI rules, so a CLI
    rule can override a config rule under last-match-wins.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(TreeglobConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue

        if cfg_field.name == "ignore":
            current = list(getattr(cli_opts, "ignore", []) or [])
            setattr(cli_opts, "ignore", list(cfg_value) + current)
            continue

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
