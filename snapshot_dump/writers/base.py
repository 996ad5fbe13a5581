"""Abstract base writer and output container.

WHY: The canonical snapshot model is written out as text, and the
pipeline should not care how. This base class fixes the interface so
the pipeline and tests can work with any writer the same way.

HOW: BaseWriter is an ABC with a ``name`` property and a ``render()``
method. WriterOutput bundles the rendered content with its MIME type.

RULES:
- Subclasses MUST implement ``name`` and ``render()``
- ``render()`` is pure: it never mutates the snapshot and never touches
  the filesystem; the caller writes ``content`` to disk
- ``content`` is str; the pipeline encodes it as UTF-8 with "\\n" line
  endings on every platform
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from snapshot_dump.core.model import Snapshot


@dataclass
class WriterOutput:
    """Rendered output of one writer.

    Attributes:
        content: The complete file content.
        media_type: MIME type for the content, e.g. ``"text/plain"``.
    """

    content: str
    media_type: str


class BaseWriter(ABC):
    """Abstract base for snapshot writers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable writer name, e.g. 'Text Dump'."""

    @abstractmethod
    def render(self, snapshot: Snapshot) -> WriterOutput:
        """Render a canonical snapshot.

        Args:
            snapshot: A snapshot already passed through canonicalize().

        Returns:
            The rendered output.
        """
