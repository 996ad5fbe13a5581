"""Snapshot writer registry.

WHY: The pipeline looks writers up by key rather than importing a
concrete class, so a second dump flavour is one module plus one line
here.

HOW: WRITERS maps string keys to writer *classes* (not instances).
Callers instantiate as needed: ``writer = WRITERS["text"]()``.

RULES:
- Keys are snake_case identifiers
- Values are BaseWriter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from snapshot_dump.writers.text_dump import TextDumpWriter

if TYPE_CHECKING:
    from snapshot_dump.writers.base import BaseWriter

WRITERS: dict[str, type[BaseWriter]] = {
    "text": TextDumpWriter,
}

DEFAULT_WRITER = "text"
