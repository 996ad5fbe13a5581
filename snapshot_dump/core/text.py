"""Text helpers for the snapshot INI dialect.

WHY: The snapshot dialect is loosely structured text. Values may carry
quotes, integers may be hex or octal, lists are comma separated, and
paths may use either separator. Every builder needs the same small set
of string operations, and they must behave identically everywhere or
the dump stops being canonical.

HOW: Pure functions over str. Nothing here raises for bad input except
where noted; parse_unsigned() returns None so the caller decides whether
a failure is fatal.

RULES:
- Comment stripping is lexical: ";" and "#" end the line even inside
  quotes (a known limitation of the dialect, kept on purpose)
- Unsigned integers must consume the whole string: no sign, no
  whitespace, no trailing characters, at most 64 bits
- Output paths always use "/"; joined paths use the configured separator
"""

from __future__ import annotations

import re
from typing import Iterable

_WHITESPACE = " \t\r\n\v\f"
_QUOTES = ("\"", "'")
_COMMENT_CHARS = ("\r", ";", "#")

# Hex (0x...), octal (leading 0) or decimal, nothing else.
_UNSIGNED_RE = re.compile(r"^(?:0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)\Z")

_UINT64_MAX = (1 << 64) - 1

# "C:" or "c:..." drive-letter prefix
_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def trim(text: str) -> str:
    return text.strip(_WHITESPACE)


def strip_quotes(text: str) -> str:
    """Trim, then remove one outer pair of matching quotes.

    A lone quote, or quotes that do not match ("abc'), are left alone.
    """
    value = trim(text)
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def strip_comment(line: str) -> str:
    """Truncate a line at the first CR, ";" or "#"."""
    cut = len(line)
    for ch in _COMMENT_CHARS:
        pos = line.find(ch)
        if pos != -1 and pos < cut:
            cut = pos
    return line[:cut]


def parse_unsigned(text: str) -> int | None:
    """Parse an unsigned integer with C-style base detection.

    RULES:
    - "0x"/"0X" prefix → hexadecimal
    - leading "0" → octal ("0" itself is zero)
    - otherwise decimal
    - the whole string must match; returns None on any failure
    - values above 2**64 - 1 are rejected

    Args:
        text: The candidate string, already trimmed by the caller.

    Returns:
        The integer value, or None if the text is not a valid unsigned
        integer.
    """
    if not _UNSIGNED_RE.match(text):
        return None
    if text[:2] in ("0x", "0X"):
        value = int(text[2:], 16)
    elif len(text) > 1 and text[0] == "0":
        value = int(text[1:], 8)
    else:
        value = int(text, 10)
    if value > _UINT64_MAX:
        return None
    return value


def split_comma_list(value: str) -> list[str]:
    """Split on commas, trim every element, drop empty elements."""
    items = []
    for part in value.split(","):
        item = trim(part)
        if item:
            items.append(item)
    return items


def join_comma_list(items: Iterable[str]) -> str:
    return ",".join(items)


def normalize_path(path: str, strip_trailing: bool = False) -> str:
    """Unify separators to "/" and optionally drop trailing slashes."""
    out = path.replace("\\", "/")
    if strip_trailing:
        out = out.rstrip("/")
    return out


def is_absolute_path(path: str) -> bool:
    """True for unix ("/x"), UNC ("\\\\host\\share") and drive-letter ("C:") paths."""
    if not path:
        return False
    if path[0] in ("/", "\\"):
        return True
    return bool(_DRIVE_RE.match(path))


def join_path(base: str, rel: str, sep: str) -> str:
    """Join a snapshot-relative path onto a base directory.

    WHY: Device and trace files are named relative to the snapshot
    directory, but may also be absolute. The separator inserted between
    the two parts is configuration, so a snapshot written on one platform
    can be joined for another.

    RULES:
    - empty rel → base
    - absolute rel → rel unchanged
    - empty base → rel
    - sep is only inserted when base does not already end in "/", "\\"
      or sep
    """
    if not rel:
        return base
    if is_absolute_path(rel):
        return rel
    if not base:
        return rel
    if base[-1] in ("/", "\\", sep):
        return base + rel
    return base + sep + rel
