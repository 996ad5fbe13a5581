"""Configuration constants and .env loading.

WHY: File names, the tool name used in diagnostics, the path separator
used when joining snapshot-relative paths, and the log level are plain
data, not logic. Keeping them in one module makes them easy to find and
to override from the environment.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings. resolve_path_separator() validates a separator
supplied by the caller or the environment.

RULES:
- The path separator is a configuration value, not a platform switch;
  SNAPSHOT_DUMP_PATH_SEP overrides it, os.sep is the fallback
- Separators are validated when used, not at import time
- Only "/" and "\\" are accepted as separators
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

TOOL_NAME = "snapshot_parse_dump"
"""Prefix for every diagnostic and status line the CLI prints."""

SNAPSHOT_INI_NAME = "snapshot.ini"
"""Manifest file name inside a snapshot directory."""

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

VALID_PATH_SEPARATORS = ("/", "\\")


def resolve_path_separator(value: str | None) -> str:
    """Return a validated path separator, falling back to os.sep.

    RULES:
    - None or empty string means "use os.sep"
    - Anything other than "/" or "\\" raises ValueError
    """
    if not value:
        return os.sep
    if value not in VALID_PATH_SEPARATORS:
        raise ValueError(
            "Invalid path separator {!r}; expected one of: {}".format(
                value, " ".join(VALID_PATH_SEPARATORS)
            )
        )
    return value


TARGET_PATH_SEPARATOR = os.getenv("SNAPSHOT_DUMP_PATH_SEP", "")
"""Separator for joining snapshot-relative paths; "" means os.sep."""


def target_path_separator(override: str | None = None) -> str:
    """Resolve the separator to use: explicit override, then environment."""
    return resolve_path_separator(override or TARGET_PATH_SEPARATOR)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("SNAPSHOT_DUMP_LOG_LEVEL", "WARNING").upper()
