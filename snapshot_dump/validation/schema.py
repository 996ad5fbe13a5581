"""JSON-schema validator for raw snapshot files.

WHY: The dumper's own builders are strict about ordering, duplicates and
integer syntax. A second, independent reading of each file catches
structural problems the way a downstream consumer of the dialect would
see them, before any model is built.

HOW: read_sections() reads a file leniently. Lines without "=" are
skipped, a definition before any header goes to a "" section, and the
last value of a repeated key wins. The resulting dict of sections is
validated with jsonschema against a per-role schema shipped in
validation/schemas/.

RULES:
- One schema per FileRole: <role>.schema.json
- Schemas are loaded once and cached
- A jsonschema.ValidationError becomes a SnapshotError with code
  VALIDATION naming the offending section/key path
- Lenient reading never raises; only the schema decides
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

from snapshot_dump.core.text import strip_comment, trim
from snapshot_dump.errors import ErrorCode, SnapshotError
from snapshot_dump.validation.base import FileRole, SnapshotValidator

logger = logging.getLogger(__name__)

_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"

_CACHED_SCHEMAS: dict[FileRole, dict[str, Any]] = {}


def _get_schema(role: FileRole) -> dict[str, Any]:
    if role not in _CACHED_SCHEMAS:
        with open(_SCHEMA_DIR / "{}.schema.json".format(role.value), encoding="utf-8") as f:
            _CACHED_SCHEMAS[role] = json.load(f)
    return _CACHED_SCHEMAS[role]


def read_sections(text: str) -> dict[str, dict[str, str]]:
    """Read dialect text into {section: {key: value}}, never failing.

    Global definitions (before any header) land in the "" section, which
    is omitted when empty.
    """
    sections: dict[str, dict[str, str]] = {"": {}}
    current = ""
    for raw in text.split("\n"):
        line = trim(strip_comment(raw))
        if not line:
            continue
        if line.startswith("[") and "]" in line:
            current = trim(line[1:line.index("]")])
            sections.setdefault(current, {})
            continue
        key, sep, value = line.partition("=")
        if sep:
            sections[current][trim(key)] = trim(value)
    if not sections[""]:
        del sections[""]
    return sections


class SchemaValidator(SnapshotValidator):
    """Validates each snapshot file against its role's JSON schema."""

    @property
    def name(self) -> str:
        return "json-schema"

    def validate(self, role: FileRole, text: str, source: str) -> SnapshotError | None:
        instance = read_sections(text)
        try:
            jsonschema.validate(instance=instance, schema=_get_schema(role))
        except jsonschema.ValidationError as exc:
            where = "/".join(str(p) for p in exc.absolute_path) or "<file>"
            logger.debug("%s rejected %s file %s at %s: %s",
                           self.name, role.value, source, where, exc.message)
            return SnapshotError(
                ErrorCode.VALIDATION,
                "{} file rejected at {}: {}".format(role.value, where, exc.message),
                source=source,
            )
        return None
