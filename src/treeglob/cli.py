#!/usr/bin/env python3
"""
treeglob: Shell-style glob matching against the filesystem

Common usage:
  treeglob 'src/**/*.py'
  treeglob '*.{jpg,png}' --match-base
  treeglob '**/*.log' --ignore 'node_modules/**' --ignore '!keep.log'
  treeglob 'docs/**/' --absolute

Quote patterns so the shell does not expand them first.
Settings can also come from `.treeglob.toml` or `[tool.treeglob]` in pyproject.toml.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from treeglob.config import find_config_file, load_config, merge_cli_with_config
from treeglob.errors import TreeglobError
from treeglob.globber import Globber
from treeglob.options import GlobOptions

log = logging.getLogger(__name__)

# Boolean options that a config file may also set. `None` after parsing means
# the flag was not given on the command line.
_TRACKED_FLAGS = [
    "dot",
    "match_base",
    "include_directories",
    "follow_symlinks",
    "case_sensitive",
    "allow_negation",
    "expand_braces",
    "absolute",
    "realpath",
    "throw_on_error",
    "gitignore",
]


@dataclass
class Options:
    """Command-line options for the treeglob tool."""

    patterns: list[str]
    cwd: str | None
    ignore: list[str]
    dot: bool
    match_base: bool
    include_directories: bool
    follow_symlinks: bool
    case_sensitive: bool
    allow_negation: bool
    expand_braces: bool
    absolute: bool
    realpath: bool
    throw_on_error: bool
    gitignore: bool
    null: bool
    output: str
    no_config: bool
    verbose: bool
    version: bool

    def glob_options(self) -> GlobOptions:
        options = GlobOptions(
            ignore=list(self.ignore),
            include_directories=self.include_directories,
            follow_symlinks=self.follow_symlinks,
            case_sensitive=self.case_sensitive,
            allow_negation=self.allow_negation,
            expand_braces=self.expand_braces,
            absolute=self.absolute,
            realpath=self.realpath,
            dot=self.dot,
            match_base=self.match_base,
            throw_on_error=self.throw_on_error,
            gitignore=self.gitignore,
        )
        if self.cwd is not None:
            options.base_directory = self.cwd
        return options


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="treeglob",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("patterns", nargs="*", metavar="PATTERN", help="Glob patterns to match")
    parser.add_argument(
        "-C",
        "--cwd",
        type=str,
        default=None,
        metavar="DIR",
        help="Base directory for relative patterns and output (default: current directory)",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Ignore paths matching PATTERN; prefix with '!' to re-include. Can be repeated",
    )
    parser.add_argument(
        "--dot", action="store_true", default=None, help="Let wildcards match names starting with '.'"
    )
    parser.add_argument(
        "--match-base",
        action="store_true",
        dest="match_base",
        default=None,
        help="Match patterns without '/' against basenames at any depth",
    )
    parser.add_argument(
        "--include-dirs",
        action="store_true",
        dest="include_directories",
        default=None,
        help="Report matching directories as well as files",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        dest="follow_symlinks",
        default=None,
        help="Descend into symlinked directories (cycles are detected)",
    )
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        dest="case_sensitive",
        default=None,
        help="Compare names case-sensitively",
    )
    parser.add_argument(
        "--ignore-case",
        action="store_false",
        dest="case_sensitive",
        default=None,
        help="Compare names case-insensitively",
    )
    parser.add_argument(
        "--no-negation",
        action="store_false",
        dest="allow_negation",
        default=None,
        help="Treat a leading '!' in ignore patterns literally",
    )
    parser.add_argument(
        "--no-braces",
        action="store_false",
        dest="expand_braces",
        default=None,
        help="Disable {a,b} brace expansion",
    )
    parser.add_argument(
        "--absolute", action="store_true", default=None, help="Print absolute paths"
    )
    parser.add_argument(
        "--realpath",
        action="store_true",
        default=None,
        help="Print canonical paths with symlinks resolved",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        dest="throw_on_error",
        default=None,
        help="Fail on unreadable directories instead of skipping them",
    )
    parser.add_argument(
        "--gitignore",
        action="store_true",
        default=None,
        help="Also skip paths excluded by .gitignore files",
    )
    parser.add_argument(
        "-0", "--null", action="store_true", help="Separate results with NUL instead of newline"
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout); files are written atomically",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help="Do not read .treeglob.toml or pyproject.toml settings",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug details to stderr"
    )
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns the options and the set of option names the user set explicitly
    (for config merge precedence).
    """
    opts = _build_parser().parse_args(args)
    defaults = GlobOptions()

    explicit_flags: set[str] = set()
    resolved: dict[str, bool] = {}
    for name in _TRACKED_FLAGS:
        value = getattr(opts, name)
        if value is None:
            resolved[name] = getattr(defaults, name)
        else:
            explicit_flags.add(name)
            resolved[name] = value

    return (
        Options(
            patterns=opts.patterns,
            cwd=opts.cwd,
            ignore=opts.ignore,
            null=opts.null,
            output=opts.output,
            no_config=opts.no_config,
            verbose=opts.verbose,
            version=opts.version,
            **resolved,
        ),
        explicit_flags,
    )


def _collect(globber: Globber, patterns: Iterable[str], case_sensitive: bool) -> Iterable[str]:
    """Yield matches for all patterns, dropping repeats across patterns."""
    seen: set[str] = set()
    for pattern in patterns:
        for path in globber.iter_matches(pattern):
            key = path if case_sensitive else path.casefold()
            if key not in seen:
                seen.add(key)
                yield path


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the treeglob CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code: 0 if anything matched, 1 if nothing matched, 2 on errors
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("treeglob")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
        )

    if not options.patterns:
        print("Error: No pattern specified. Use --help for more options.", file=sys.stderr)
        return 2

    separator = "\0" if options.null else "\n"
    count = 0
    try:
        if not options.no_config:
            config_path = find_config_file(Path(options.cwd) if options.cwd else Path.cwd())
            if config_path:
                log.debug("Using config file %s", config_path)
                merge_cli_with_config(options, load_config(config_path), explicit_flags)

        globber = Globber(options.glob_options())
        matches = _collect(globber, options.patterns, options.case_sensitive)
        if options.output == "-":
            for path in matches:
                sys.stdout.write(path + separator)
                count += 1
            sys.stdout.flush()
        else:
            results = list(matches)
            count = len(results)
            with atomic_output_file(options.output, make_parents=True) as tmp_path:
                Path(tmp_path).write_text("".join(path + separator for path in results))
    except (TreeglobError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0 if count else 1


if __name__ == "__main__":
    sys.exit(main())
