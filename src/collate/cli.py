"""Command-line entry point.

Usage:
    collate SOURCE OUTPUT
    collate -s SOURCE -o OUTPUT [--quiet | --verbose]
    collate -o OUTPUT              # source defaults to the current directory

Reads every file under SOURCE, expands block exports and writes each file
export under OUTPUT. Any failure prints a diagnostic and exits with status 1
before anything is written.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from collate import __version__
from collate.config import DEFAULT_CONFIG, CollateConfig
from collate.library import CollateError, Library, terminal

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collate",
        description="Render block exports from a directory of collate sources.",
    )
    parser.add_argument("source_pos", nargs="?", metavar="SOURCE", help="Source directory")
    parser.add_argument("output_pos", nargs="?", metavar="OUTPUT", help="Output directory")
    parser.add_argument(
        "-s", "--source", dest="source_opt", metavar="DIR", help="Source directory (default: .)"
    )
    parser.add_argument("-o", "--output", dest="output_opt", metavar="DIR", help="Output directory")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log expansion details")
    parser.add_argument(
        "--max-passes",
        type=int,
        default=DEFAULT_CONFIG.max_expansion_passes,
        metavar="N",
        help="Cap on block-export expansion passes; 0 disables the cap "
        f"(default: {DEFAULT_CONFIG.max_expansion_passes})",
    )
    parser.add_argument("--version", action="version", version=f"collate {__version__}")
    return parser


def _pick(parser: argparse.ArgumentParser, what: str, positional: str | None, option: str | None):
    if positional is not None and option is not None:
        parser.error(f"{what} directory given both as argument and as option")
    return option if option is not None else positional


def _configure_logging(quiet: bool, verbose: bool) -> None:
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger("collate").setLevel(level)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    source = _pick(parser, "source", args.source_pos, args.source_opt) or "."
    output = _pick(parser, "output", args.output_pos, args.output_opt)
    if output is None:
        parser.error("an output directory is required (OUTPUT or -o/--output)")
    if args.max_passes < 0:
        parser.error("--max-passes cannot be negative")

    _configure_logging(args.quiet, args.verbose)
    config = CollateConfig(max_expansion_passes=args.max_passes or None)

    try:
        library = Library.from_directory(source, config)
    except CollateError as err:
        print(f"Parsing failed: {err.format_compact()}", file=sys.stderr)
        return 1
    logger.debug(f"Loaded {len(library)} block(s) from '{source}'")

    try:
        results = library.export_all(output)
    except CollateError as err:
        print(f"Export failed: {err.format_compact()}", file=sys.stderr)
        return 1

    if not args.quiet:
        total = sum(r.size for r in results)
        print(terminal.success(f"Exported {len(results)} file(s), {total}B to '{output}'"))
    return 0
