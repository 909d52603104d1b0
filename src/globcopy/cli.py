"""
CLI entrypoint for globcopy package.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import IO, List, Optional

from colorama import Fore, Style, just_fix_windows_console

from . import __version__
from .core import MatchEngine
from .errors import GlobcopyError
from .models import TraversalConfig
from .patterns import MatchSet
from .report import Destination, assemble_report, deliver

LOGGER_NAME = "globcopy"


class _ColorFormatter(logging.Formatter):
    COLORS = {
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def __init__(self, use_color: bool) -> None:
        super().__init__(f"[{LOGGER_NAME}] %(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        color = self.COLORS.get(record.levelno)
        if self.use_color and color:
            return color + msg + Style.RESET_ALL
        return msg


class _CliHandler(logging.StreamHandler):
    """Stderr handler installed by the command line; replaced on each call."""


def configure_logging(verbose: bool, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Route the package logger to stderr; DEBUG when verbose, else WARNING."""
    out = stream if stream is not None else sys.stderr
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _CliHandler):
            logger.removeHandler(handler)

    handler = _CliHandler(out)
    handler.setFormatter(_ColorFormatter(use_color=out.isatty()))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


def _max_depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth: {value!r}")
    if depth < 0:
        raise argparse.ArgumentTypeError("depth must be 0 or greater")
    return depth


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="globcopy",
        description="Copy the contents of files matching glob patterns to the clipboard or stdout.",
    )
    p.add_argument(
        "patterns",
        nargs="*",
        help="Glob patterns to match files; prefix with '!' to exclude. "
        "Later patterns override earlier ones.",
    )
    p.add_argument("--root", type=Path, default=Path("."), help="Root directory for file search")
    p.add_argument(
        "--max-depth",
        type=_max_depth,
        help="Set the maximum depth for directory traversal",
    )
    p.add_argument(
        "--output",
        choices=[d.value for d in Destination],
        default=Destination.CLIPBOARD.value,
        help="Choose the output destination (default: clipboard)",
    )
    p.add_argument("--hidden", action="store_true", help="Include hidden files and directories")
    p.add_argument("--no-ignore", action="store_true", help="Do not honour .gitignore/.ignore files")
    p.add_argument(
        "--ignore-file",
        type=Path,
        action="append",
        default=[],
        help="Extra ignore file applied from the root (repeatable)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    just_fix_windows_console()
    try:
        ns = _parse_args(argv)
        configure_logging(ns.verbose)

        try:
            patterns = MatchSet.from_strings(ns.patterns)
            config = TraversalConfig(
                root=ns.root.resolve(),
                max_depth=ns.max_depth,
                respect_ignore=not ns.no_ignore,
                hidden=ns.hidden,
                ignore_files=tuple(p.resolve() for p in ns.ignore_file),
            )
            files = MatchEngine().run(config, patterns)
            report = assemble_report(files)
            deliver(report, Destination(ns.output))
        except GlobcopyError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
