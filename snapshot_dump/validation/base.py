"""Validator capability checked against raw snapshot files.

WHY: An independent reader checks the manifest, every device file and
the trace metadata file before the model is built; if it rejects any of
them the run stops. The dumper must not care which reader that is, so it
only depends on this interface. Tests swap in doubles that always
accept, always reject, or record what they were shown.

HOW: FileRole names the three kinds of snapshot file. SnapshotValidator
is an ABC with one method that returns None on acceptance or a
SnapshotError on rejection. AcceptAllValidator is the trivial
implementation.

RULES:
- validate() receives the complete raw text of one file
- It returns a SnapshotError (code VALIDATION or FILE_OPEN); it does not
  raise for a rejected file
- Validators are stateless from the pipeline's point of view; the
  pipeline calls them once per file, manifest first

To add a validator:
1. Subclass SnapshotValidator
2. Implement validate()
3. Pass an instance to pipeline.run_snapshot_dump(validator=...)
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod

from snapshot_dump.errors import SnapshotError


class FileRole(str, enum.Enum):
    """Which kind of snapshot file a text stream is."""

    SNAPSHOT = "snapshot"
    DEVICE = "device"
    TRACE = "trace"


class SnapshotValidator(ABC):
    """Abstract base for raw-file validators."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable validator name, used in log messages."""

    @abstractmethod
    def validate(self, role: FileRole, text: str, source: str) -> SnapshotError | None:
        """Check one raw snapshot file.

        Args:
            role: Which kind of file the text is.
            text: The complete file content.
            source: The file path, for error messages.

        Returns:
            None if the file is accepted, otherwise the error describing
            why it was rejected.
        """


class AcceptAllValidator(SnapshotValidator):
    """Validator that accepts every file."""

    @property
    def name(self) -> str:
        return "accept-all"

    def validate(self, role: FileRole, text: str, source: str) -> SnapshotError | None:
        return None
