"""
kelp.cli - kelp Command Line Interface

This module provides the main CLI entry point for kelp:

- kelp parse --input <file>   Read a file and print one JSON record per form
- kelp parse --input -        Read from standard input

Reader options (comment retention, nesting limit) come from the nearest
kelp.it file; no flag changes how the input is parsed.
"""

import argparse
import os
import sys
import traceback
from dataclasses import dataclass
from typing import Any, Optional

from kelp import __version__


@dataclass
class CliLog:
    """Diagnostic log for CLI commands."""

    verbose: bool = False
    log_file: Any = None

    def info(self, message: str) -> None:
        if self.log_file:
            self.log_file.write(f"{message}\n")
            self.log_file.flush()
        if self.verbose:
            print(f"[kelp] {message}", file=sys.stderr)
            sys.stderr.flush()


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def cmd_parse(args: argparse.Namespace, log: CliLog) -> int:
    """Read the input and print every top-level form as a JSON record."""
    from kelp.config import ReaderConfig
    from kelp.json import dump_lines
    from kelp.reader import read_str
    from kelp.types import ReaderError

    path = args.input

    try:
        config = ReaderConfig.load(os.getcwd() if path == "-" else path)
    except (OSError, ValueError) as e:
        print(f"Error in configuration: {e}", file=sys.stderr)
        return 1
    if config.config_path:
        log.info(f"Loaded settings from {config.config_path}")
    for key in config.unknown_keys:
        log.info(f"Warning: unknown setting {key} in {config.config_path}")

    try:
        src = _read_input(path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    log.info(f"Read {len(src)} characters from {path}")

    try:
        forms = read_str(src, config.keep_comments, config.max_depth)
    except ReaderError as e:
        print(f"Error: {e}", file=sys.stderr)
        if log.verbose:
            traceback.print_exc(file=sys.stderr)
        return 1

    try:
        count = dump_lines(forms, sys.stdout)
    except (TypeError, ValueError, RecursionError) as e:
        print(f"Error: failed to serialize output: {e}", file=sys.stderr)
        if log.verbose:
            traceback.print_exc(file=sys.stderr)
        return 1
    log.info(f"Wrote {count} forms")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="kelp",
        description="kelp - A reader for a small Lisp",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  kelp parse --input forms.lisp     Print each form in forms.lisp as JSON
  kelp parse -i - < forms.lisp      Same, reading standard input
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print diagnostics to stderr",
    )

    parser.add_argument(
        "--log",
        metavar="FILE",
        help="Append diagnostics to FILE",
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse", help="Read a file and print its forms as JSON, one per line"
    )
    parse_parser.add_argument(
        "--input",
        "-i",
        required=True,
        metavar="PATH",
        help="The input file to read ('-' for standard input)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the kelp CLI. Calls sys.exit with return code."""
    sys.exit(_main(argv))


def _main(argv: Optional[list[str]] = None) -> int:
    """Internal main that returns exit code."""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.subcommand is None:
        parser.print_help(sys.stderr)
        return 1

    log_file = None
    if args.log:
        try:
            log_file = open(args.log, "a", encoding="utf-8")
        except OSError as e:
            print(f"Error opening log file: {e}", file=sys.stderr)
            return 1

    try:
        log = CliLog(verbose=args.verbose, log_file=log_file)
        if args.subcommand == "parse":
            return cmd_parse(args, log)
        return 1
    finally:
        if log_file:
            log_file.close()


if __name__ == "__main__":
    main()
