#!/usr/bin/env python3
"""Command-line front-end: print the named groups of each input line as JSON.

Usage:
    regex-record '^(?<LastName>\\w+), (?<FirstName>\\w+)' people.txt
    cat people.txt | regex-record --strict '^(?<LastName>\\w+), (?<FirstName>\\w+)'

Exit status:
    0 - all lines processed
    1 - a line did not match in --strict mode
    2 - invalid pattern or unreadable input
"""
import argparse
import sys
from typing import List, Optional, TextIO

import structlog

from regex_record.config import configure_logging
from regex_record.errors.exceptions import NoMatchError, PatternError
from regex_record.models.extraction import NoMatchPolicy
from regex_record.services.conversion.deserializer import values_to_json
from regex_record.services.extraction.group_extractor import compile_pattern, extract_groups

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="regex-record",
        description="Extract named capture groups from each input line as JSON objects",
    )
    parser.add_argument("pattern", help="Regular expression with named capture groups")
    parser.add_argument(
        "file",
        nargs="?",
        help="Input file (default: stdin)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--skip-unmatched",
        action="store_true",
        help="Do not print lines that produce no groups",
    )
    mode.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first line that does not match",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override REGEX_RECORD_LOG_LEVEL",
    )
    return parser


def run(pattern: str, stream: TextIO, out: TextIO, strict: bool = False, skip_unmatched: bool = False) -> int:
    """Extract groups from every line of stream and write JSON lines to out.

    Returns:
        Process exit status
    """
    try:
        compiled = compile_pattern(pattern)
    except PatternError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    policy = NoMatchPolicy.RAISE if strict else NoMatchPolicy.EMPTY
    lines = 0
    line_number = 0
    try:
        for line_number, line in enumerate(stream, start=1):
            text = line.rstrip("\r\n")
            try:
                values = extract_groups(compiled, text, no_match=policy)
            except NoMatchError:
                print(f"error: line {line_number} does not match pattern", file=sys.stderr)
                return 1
            if not values and skip_unmatched:
                continue
            out.write(values_to_json(values) + "\n")
            lines += 1
    except UnicodeDecodeError as e:
        print(f"error: input is not valid UTF-8 after line {line_number}: {e.reason}", file=sys.stderr)
        return 2

    logger.debug("cli_finished", lines_written=lines)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the regex-record console script."""
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level)

    if args.file is None:
        return run(args.pattern, sys.stdin, sys.stdout, args.strict, args.skip_unmatched)

    try:
        with open(args.file, encoding="utf-8") as stream:
            return run(args.pattern, stream, sys.stdout, args.strict, args.skip_unmatched)
    except OSError as e:
        print(f"error: cannot read {args.file}: {e.strerror}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
