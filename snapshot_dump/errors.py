"""Structured error type shared by every pipeline stage.

WHY: Failures come from many places: a bad CLI flag, an unreadable
file, a line without "=", a missing [device] name, a validator
rejection. The CLI needs to report all of them the same way, and tests
need to tell them apart without matching message text.

HOW: SnapshotError carries a severity, a stable domain code, a
human-readable message, and optionally the file it concerns. Components
raise it; the pipeline turns it into a typed DumpResult; the CLI renders
it and exits with code 1.

RULES:
- Every failure the tool anticipates is a SnapshotError
- Codes are stable identifiers; messages are for humans
- str(error) is the single line the CLI prints after the tool prefix
"""

from __future__ import annotations

import enum


class ErrorSeverity(str, enum.Enum):
    """How bad an error is. Everything the pipeline raises today is ERROR."""

    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class ErrorCode(str, enum.Enum):
    """Stable domain codes for snapshot failures.

    RULES:
    - USAGE: bad or missing command-line flags
    - FILE_OPEN: an input or the output file could not be opened/written
    - SYNTAX: malformed header, line without "=", definition before header
    - MISSING_SECTION / MISSING_KEY: a required section or key is absent
    - DUPLICATE_KEY: a single-valued key appears more than once
    - INVALID_VALUE: a required integer does not parse
    - EMPTY_LIST: an identifier or file list is empty
    - DANGLING_REFERENCE: a buffer id names a section that does not exist
    - VALIDATION: the validator rejected a raw file
    """

    USAGE = "usage"
    FILE_OPEN = "file_open"
    SYNTAX = "syntax"
    MISSING_SECTION = "missing_section"
    MISSING_KEY = "missing_key"
    DUPLICATE_KEY = "duplicate_key"
    INVALID_VALUE = "invalid_value"
    EMPTY_LIST = "empty_list"
    DANGLING_REFERENCE = "dangling_reference"
    VALIDATION = "validation"


class SnapshotError(Exception):
    """A structured, fatal snapshot processing error."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        source: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> None:
        self.code = code
        self.message = message
        self.source = source
        self.severity = severity
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.source:
            return "{}: {}".format(self.source, self.message)
        return self.message

    def __repr__(self) -> str:
        return "SnapshotError(code={}, severity={}, message={!r}, source={!r})".format(
            self.code.value, self.severity.value, self.message, self.source
        )
