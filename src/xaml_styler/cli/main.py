"""Main CLI entry point for the xaml-styler command-line tool.

Formats XAML files to standard output, rewrites them in place, or checks
whether they are already formatted.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xaml_styler import __version__
from xaml_styler.api import StylerService
from xaml_styler.shared import ConfigError, StylerConfig, StylerError, get_logger

EXIT_OK = 0
EXIT_CHECK_FAILED = 1
EXIT_ERROR = 2

PRESETS = {
    "default": StylerConfig.default,
    "compact": StylerConfig.compact,
    "tabs": StylerConfig.tabs,
}


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xaml-styler",
        description="Deterministic formatter for XAML markup"
    )

    parser.add_argument("--version", action="version", version=__version__)

    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="XAML files to format (default: read standard input)"
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--write", "-w",
        action="store_true",
        help="Rewrite files in place"
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if any input is not formatted"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    source.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Configuration preset used as the base configuration"
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="File encoding (default: utf-8)"
    )

    # Option overrides
    overrides = parser.add_argument_group("option overrides")
    overrides.add_argument(
        "--indent-size",
        type=int,
        help="Number of spaces per indentation level"
    )
    overrides.add_argument(
        "--tabs",
        dest="indent_with_tabs",
        action="store_const",
        const=True,
        help="Indent with tabs"
    )
    overrides.add_argument(
        "--attributes-tolerance",
        type=int,
        help="Maximum attribute count kept on the start tag line"
    )
    overrides.add_argument(
        "--reorder-grid",
        dest="reorder_grid_children",
        action="store_const",
        const=True,
        help="Reorder Grid children by row and column"
    )
    overrides.add_argument(
        "--reorder-canvas",
        dest="reorder_canvas_children",
        action="store_const",
        const=True,
        help="Reorder Canvas children by position"
    )
    overrides.add_argument(
        "--reorder-setters",
        choices=["None", "Property", "TargetName", "TargetNameThenProperty"],
        help="Sort key for Setter elements"
    )

    # Global options
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


def build_config(args: argparse.Namespace) -> StylerConfig:
    """Build the styling configuration from a file, a preset and overrides.

    Raises:
        ConfigError: If the configuration file cannot be loaded or an
            option is invalid
    """
    if args.config:
        config = StylerConfig.from_file(args.config)
    elif args.preset:
        config = PRESETS[args.preset]()
    else:
        config = StylerConfig()

    overrides: Dict[str, Any] = {}
    for name in (
        "indent_size",
        "indent_with_tabs",
        "attributes_tolerance",
        "reorder_grid_children",
        "reorder_canvas_children",
        "reorder_setters",
    ):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value

    return config.override(**overrides) if overrides else config


def _read(path: Path, encoding: str) -> str:
    with path.open("r", encoding=encoding, newline="") as handle:
        return handle.read()


def _write(path: Path, content: str, encoding: str) -> None:
    with path.open("w", encoding=encoding, newline="") as handle:
        handle.write(content)


def format_paths(service: StylerService, args: argparse.Namespace) -> int:
    """Format every path named on the command line."""
    logger = get_logger(__name__, service.correlation_id, "cli")
    unformatted: List[Path] = []

    for path in args.paths:
        logger.debug("Formatting file", extra={"file": str(path)})
        source = _read(path, args.encoding)
        formatted = service.format(source)

        if args.check:
            if formatted != source:
                unformatted.append(path)
                print(f"would reformat {path}", file=sys.stderr)
        elif args.write:
            if formatted != source:
                _write(path, formatted, args.encoding)
                if not args.quiet:
                    print(f"reformatted {path}", file=sys.stderr)
        else:
            sys.stdout.write(formatted)

    return EXIT_CHECK_FAILED if unformatted else EXIT_OK


def format_stdin(service: StylerService, args: argparse.Namespace) -> int:
    """Format standard input to standard output."""
    source = sys.stdin.read()
    formatted = service.format(source)
    if args.check:
        return EXIT_OK if formatted == source else EXIT_CHECK_FAILED
    sys.stdout.write(formatted)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.write and not args.paths:
        parser.error("--write requires at least one path")

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        service = StylerService(build_config(args))
        if args.paths:
            return format_paths(service, args)
        return format_stdin(service, args)
    except (StylerError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
