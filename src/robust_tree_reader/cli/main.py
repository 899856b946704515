"""Main CLI entry point for the robust-tree-reader command-line tool.

Reads exactly one listing file and reconstructs its tree. By default the tree is
discarded after construction and the exit status alone reports success; the
``--format`` option prints it instead.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from robust_tree_reader import __version__
from robust_tree_reader.api import ReadResult, TreeReader
from robust_tree_reader.shared.config import ConfigError, ReaderConfig
from robust_tree_reader.shared.errors import (
    InvalidCharacterError,
    MalformedPathError,
    SourceNotFoundError,
    SourceTooLargeError,
    UsageError,
)
from robust_tree_reader.shared.logging import get_logger
from robust_tree_reader.tree import UNICODE_STYLE, RenderStyle, render_listing

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

logger = get_logger(__name__, None, "cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="robust-tree-reader",
        description=(
            "Read an indentation-based tree listing (such as clang -ast-dump "
            "output) into a tree"
        )
    )

    parser.add_argument("--version", action="version", version=__version__)

    # Arity is checked by hand so that a wrong count gets the usage error
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        metavar="LISTING",
        help="Listing file to read (exactly one)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["none", "json", "text", "summary"],
        default="none",
        help="What to print after reading (default: none)"
    )
    parser.add_argument(
        "--preset",
        choices=["clang", "unicode", "strict"],
        default="clang",
        help="Reader configuration preset (default: clang)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON reader configuration file (overrides --preset)"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Print per-layer timing and memory to stderr"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> ReaderConfig:
    """Build the reader configuration from command-line options."""
    if args.config is not None:
        config = ReaderConfig.from_file(args.config)
    else:
        config = ReaderConfig.preset(args.preset)

    if args.profile:
        config = config.override(global__enable_profiling=True)
    return config


def select_style(config: ReaderConfig) -> RenderStyle:
    """Pick the drawing style matching the branch glyphs the reader accepts."""
    unicode_glyphs = {UNICODE_STYLE.branch.strip(), UNICODE_STYLE.last_branch.strip()}
    if unicode_glyphs <= set(config.scanner.branch_glyphs):
        return UNICODE_STYLE
    return RenderStyle()


def format_result(result: ReadResult, format_type: str, config: ReaderConfig) -> Optional[str]:
    """Format a read result for output, or None when nothing is printed."""
    if format_type == "json":
        return json.dumps(result.tree.to_dict(), indent=2)
    if format_type == "text":
        style = select_style(config)
        return render_listing(result.tree, style).rstrip("\n")
    if format_type == "summary":
        return json.dumps(result.summary(), indent=2)
    return None


def cmd_read(args: argparse.Namespace, config: ReaderConfig) -> int:
    """Read the single listing named on the command line."""
    path = args.paths[0]
    reader = TreeReader(config)

    try:
        result = reader.read(path)
    except SourceNotFoundError as e:
        print(str(e), file=sys.stderr)
        return EXIT_FAILURE
    except InvalidCharacterError as e:
        print(f"{path}:{e.line}:{e.column}: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except SourceTooLargeError as e:
        print(f"{path}: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except MalformedPathError as e:
        print(f"{path}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not args.quiet:
        for diagnostic in result.diagnostics:
            position = diagnostic.position or {}
            location = f"{path}:{position['line']}" if "line" in position else str(path)
            print(
                f"{location}: {diagnostic.severity.name.lower()}: {diagnostic.message}",
                file=sys.stderr
            )

    if result.profile is not None:
        print(result.profile.format_report(), file=sys.stderr)

    output = format_result(result, args.format, config)
    if output is not None:
        print(output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if len(args.paths) != 1:
            raise UsageError(
                f"expected exactly one listing file, got {len(args.paths)}"
            )
        config = load_config(args)
        return cmd_read(args, config)

    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
