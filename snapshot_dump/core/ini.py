"""INI document parser for the snapshot dialect.

WHY: Every snapshot file (manifest, device file, trace metadata) uses
the same INI-like dialect, and the meaning of a file depends on things a
plain dict would lose: repeated keys (one register per [regs] entry),
declaration order (register tie-breaks), and reopened sections. The
parser keeps all of it so the builders can apply their own rules.

HOW: Line-oriented. Each physical line is truncated at the first CR,
";" or "#", then classified as a section header, a blank line, or a
key = value definition. Sections are an ordered dict of section name →
list of IniEntry records; reopening a section appends to its list.

RULES:
- A line containing "[" is a header; the name is the trimmed text up to
  the next "]"; a "[" with no following "]" is a syntax error
- Blank lines (after comment stripping) are skipped
- A definition before the first header is a syntax error
- A definition without "=" is a syntax error
- Key and value are split at the first "=" and trimmed
- Quotes are never stripped here; builders decide where quotes matter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from snapshot_dump.core.text import strip_comment, trim
from snapshot_dump.errors import ErrorCode, SnapshotError


@dataclass(frozen=True)
class IniEntry:
    """One key = value definition, in declaration order."""

    key: str
    value: str


@dataclass
class IniDocument:
    """Ordered mapping of section name to the entries declared in it.

    RULES:
    - sections keeps first-seen order of section names
    - entries inside a section keep declaration order, duplicates included
    - source names the file the document came from (used in errors)
    """

    source: str = "<string>"
    sections: dict[str, list[IniEntry]] = field(default_factory=dict)

    def has_section(self, name: str) -> bool:
        return name in self.sections

    def section_names(self) -> list[str]:
        return list(self.sections)

    def entries(self, name: str) -> list[IniEntry]:
        """Entries of a section, or an empty list if it does not exist."""
        return list(self.sections.get(name, ()))

    def values(self, section: str, key: str) -> list[str]:
        """Every value declared for key in section, in order."""
        return [e.value for e in self.sections.get(section, ()) if e.key == key]

    def first(self, section: str, key: str) -> str | None:
        for entry in self.sections.get(section, ()):
            if entry.key == key:
                return entry.value
        return None


def _header_name(line: str, source: str, lineno: int) -> str | None:
    """Return the section name if line is a header, else None."""
    open_pos = line.find("[")
    if open_pos == -1:
        return None
    close_pos = line.find("]", open_pos + 1)
    if close_pos == -1:
        raise SnapshotError(
            ErrorCode.SYNTAX,
            "line {}: malformed section header '{}'".format(lineno, trim(line)),
            source=source,
        )
    return trim(line[open_pos + 1:close_pos])


def parse_ini(text: str, source: str = "<string>") -> IniDocument:
    """Parse dialect text into an IniDocument.

    Args:
        text: The complete file content.
        source: File path (or label) used in error messages.

    Returns:
        The parsed document.

    Raises:
        SnapshotError: SYNTAX on a malformed header, a definition before
            any header, or a definition without "=".
    """
    doc = IniDocument(source=source)
    current: list[IniEntry] | None = None

    # Only LF ends a line; strip_comment() cuts a stray CR.
    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = strip_comment(raw)

        name = _header_name(line, source, lineno)
        if name is not None:
            current = doc.sections.setdefault(name, [])
            continue

        if not trim(line):
            continue

        if current is None:
            raise SnapshotError(
                ErrorCode.SYNTAX,
                "line {}: definition before section header: '{}'".format(lineno, trim(line)),
                source=source,
            )

        eq = line.find("=")
        if eq == -1:
            raise SnapshotError(
                ErrorCode.SYNTAX,
                "line {}: couldn't parse '{}' as key=value".format(lineno, trim(line)),
                source=source,
            )

        current.append(IniEntry(key=trim(line[:eq]), value=trim(line[eq + 1:])))

    return doc


def read_text_file(path: str | Path) -> str:
    """Read a snapshot file as UTF-8 text, line endings untouched.

    Raises:
        SnapshotError: FILE_OPEN if the file cannot be opened or decoded.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise SnapshotError(
            ErrorCode.FILE_OPEN,
            "failed to open ini file ({})".format(exc.strerror or exc),
            source=str(path),
        ) from exc
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SnapshotError(
            ErrorCode.FILE_OPEN,
            "ini file is not valid UTF-8 ({})".format(exc.reason),
            source=str(path),
        ) from exc


def read_ini_file(path: str | Path) -> IniDocument:
    """Read and parse one snapshot file."""
    return parse_ini(read_text_file(path), source=str(path))
