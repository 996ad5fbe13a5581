"""Validators run against raw snapshot files before the model is built.

WHY: The pipeline depends on the validator capability, not on any one
reader, so the CLI can use the schema validator and tests can use
doubles.

HOW: VALIDATORS maps string keys to validator classes (not instances).
DEFAULT_VALIDATOR names the one the pipeline uses when none is given.

RULES:
- Keys are snake_case identifiers
- Every validator listed here must be importable without side effects
"""

from __future__ import annotations

from snapshot_dump.validation.base import AcceptAllValidator, FileRole, SnapshotValidator
from snapshot_dump.validation.schema import SchemaValidator

VALIDATORS: dict[str, type[SnapshotValidator]] = {
    "schema": SchemaValidator,
    "accept_all": AcceptAllValidator,
}

DEFAULT_VALIDATOR = "schema"

__all__ = [
    "AcceptAllValidator",
    "DEFAULT_VALIDATOR",
    "FileRole",
    "SchemaValidator",
    "SnapshotValidator",
    "VALIDATORS",
]
