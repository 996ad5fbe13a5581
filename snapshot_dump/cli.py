"""Command-line interface for the snapshot dumper.

WHY: The dump exists to be diffed in test scripts, so the tool takes
exactly three flags and reports everything through its exit code and a
single stderr line. The flag spelling (-ss_dir, -o, -quiet) matches the
other snapshot tools the dumps are compared against.

HOW: argparse with single-dash long options. A parser subclass turns
argparse's own usage failures into SnapshotError so they are reported
like every other error. main() runs the pipeline, pattern-matches the
DumpResult, and maps it to an exit code.

RULES:
- Flags: -ss_dir <dir> and -o <file> required, -quiet optional
- No -h and no positional arguments
- Exit 0 on success, 1 on any error (usage, I/O, parse, validation,
  or anything unexpected)
- Errors go to stderr as "snapshot_parse_dump: <message>"
- Success prints "snapshot_parse_dump: wrote <file>" to stdout unless
  -quiet
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

from snapshot_dump.config import LOG_LEVEL, TOOL_NAME
from snapshot_dump.errors import ErrorCode, SnapshotError
from snapshot_dump.pipeline import run_snapshot_dump

logger = logging.getLogger(__name__)

USAGE = "{} -ss_dir <snapshot_dir> -o <output_file> [-quiet]".format(TOOL_NAME)


def _report(msg: str) -> None:
    """Print a diagnostic line to stderr with the tool prefix."""
    print("{}: {}".format(TOOL_NAME, msg), file=sys.stderr, flush=True)


class _UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting with 2."""

    def error(self, message: str) -> NoReturn:
        raise SnapshotError(
            ErrorCode.USAGE,
            "{}; usage: {}".format(message, USAGE),
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = _UsageErrorParser(
        prog=TOOL_NAME,
        usage=USAGE,
        description="Parse a trace snapshot directory and write a canonical text dump.",
        add_help=False,
        allow_abbrev=False,
    )

    parser.add_argument(
        "-ss_dir",
        dest="ss_dir",
        required=True,
        help="Snapshot directory containing snapshot.ini.",
    )

    parser.add_argument(
        "-o",
        dest="output_file",
        required=True,
        help="Dump file to write (overwritten if it exists).",
    )

    parser.add_argument(
        "-quiet",
        dest="quiet",
        action="store_true",
        help="Do not print the success line.",
    )

    return parser


_VALUE_FLAGS = ("-ss_dir", "-o")
_SWITCH_FLAGS = ("-quiet",)


def _check_flag_tokens(argv: list[str]) -> None:
    """Reject any dash token that is not exactly one of the known flags.

    argparse would otherwise accept glued forms such as "-oout.txt" or
    "-o=out.txt". The token after a value flag is its value and is not
    checked.
    """
    expect_value = False
    for token in argv:
        if expect_value:
            expect_value = False
            continue
        if token in _VALUE_FLAGS:
            expect_value = True
        elif token.startswith("-") and token not in _SWITCH_FLAGS:
            raise SnapshotError(
                ErrorCode.USAGE,
                "unknown or incomplete argument '{}'; usage: {}".format(token, USAGE),
            )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse argv, raising SnapshotError (USAGE) on any problem."""
    if argv is None:
        argv = sys.argv[1:]
    _check_flag_tokens(argv)
    args = build_parser().parse_args(argv)
    if not args.ss_dir or not args.output_file:
        raise SnapshotError(ErrorCode.USAGE, "usage: {}".format(USAGE))
    return args


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        stream=sys.stderr,
        format="%(name)s: %(levelname)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns the process exit code; never raises

    Returns:
        0 on success, 1 on any error.
    """
    _configure_logging()
    try:
        args = parse_args(argv)
        result = run_snapshot_dump(args.ss_dir, args.output_file)
    except SnapshotError as e:
        _report(str(e))
        return 1
    except ValueError as e:
        # Configuration errors (bad SNAPSHOT_DUMP_PATH_SEP, etc.)
        _report(str(e))
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _report("unexpected error: {}".format(e) if str(e) else "unexpected error")
        return 1

    if result.error is not None:
        _report(str(result.error))
        return 1

    if not args.quiet:
        print("{}: wrote {}".format(TOOL_NAME, args.output_file), flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
