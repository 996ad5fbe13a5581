"""Run orchestration: snapshot directory in, canonical dump file out.

WHY: The CLI, tests and library callers all need the same fixed
sequence (read the manifest, validate every raw file, build the model,
canonicalize, write) with the guarantee that nothing is written unless
every earlier step succeeded.

HOW: build_snapshot() does everything up to and including
canonicalization and raises SnapshotError on the first failure.
run_snapshot_dump() wraps it, writes the dump, and returns a DumpResult
instead of raising, so the caller decides how to report the outcome.

RULES:
- Order: parse manifest → validate manifest, device files, trace file →
  build devices → build trace metadata → canonicalize → write
- The validator sees every file before any device file is built
- The output file is opened only after the model is complete
- Device and trace paths are joined onto the snapshot directory with the
  configured separator; absolute paths are used as given
- Only SnapshotError is converted into a DumpResult; anything else
  propagates to the caller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from snapshot_dump.config import SNAPSHOT_INI_NAME, target_path_separator
from snapshot_dump.core.builder import build_device, build_manifest, build_trace_metadata
from snapshot_dump.core.canonical import canonicalize
from snapshot_dump.core.ini import parse_ini, read_ini_file, read_text_file
from snapshot_dump.core.model import Manifest, Snapshot
from snapshot_dump.core.text import join_path
from snapshot_dump.errors import ErrorCode, SnapshotError
from snapshot_dump.validation import DEFAULT_VALIDATOR, VALIDATORS, FileRole, SnapshotValidator
from snapshot_dump.writers import DEFAULT_WRITER, WRITERS
from snapshot_dump.writers.base import BaseWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DumpResult:
    """Outcome of one run: an output path or an error, never both.

    RULES:
    - ok is True exactly when error is None
    - snapshot is the canonical model when the run got that far
    """

    output_path: Path | None = None
    error: SnapshotError | None = None
    snapshot: Snapshot | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _validate_files(
    validator: SnapshotValidator,
    files: list[tuple[FileRole, str]],
) -> None:
    for role, path in files:
        error = validator.validate(role, read_text_file(path), path)
        if error is not None:
            raise error
        logger.debug("%s accepted %s file %s", validator.name, role.value, path)


def _resolve_paths(
    snapshot_dir: str,
    manifest: Manifest,
    sep: str,
) -> tuple[list[str], str | None]:
    device_paths = [join_path(snapshot_dir, rel, sep) for _, rel in manifest.device_list]
    trace_path = None
    if manifest.trace_metadata:
        trace_path = join_path(snapshot_dir, manifest.trace_metadata, sep)
    return device_paths, trace_path


def build_snapshot(
    snapshot_dir: str,
    validator: SnapshotValidator | None = None,
    path_sep: str | None = None,
) -> Snapshot:
    """Read, validate, build and canonicalize a snapshot directory.

    Args:
        snapshot_dir: The snapshot directory as given by the user.
        validator: Validator run against every raw file; defaults to the
            registered DEFAULT_VALIDATOR.
        path_sep: Separator used to join relative paths onto
            snapshot_dir; defaults to the configured separator.

    Returns:
        The canonical snapshot model.

    Raises:
        SnapshotError: on the first I/O, syntax, semantic or validation
            failure.
        ValueError: if path_sep is not a supported separator.
    """
    sep = target_path_separator(path_sep)
    if validator is None:
        validator = VALIDATORS[DEFAULT_VALIDATOR]()

    manifest_path = join_path(snapshot_dir, SNAPSHOT_INI_NAME, sep)
    manifest_text = read_text_file(manifest_path)
    manifest = build_manifest(parse_ini(manifest_text, source=manifest_path))
    device_paths, trace_path = _resolve_paths(snapshot_dir, manifest, sep)

    files = [(FileRole.SNAPSHOT, manifest_path)]
    files.extend((FileRole.DEVICE, p) for p in device_paths)
    if trace_path is not None:
        files.append((FileRole.TRACE, trace_path))
    _validate_files(validator, files)

    devices = []
    for (_, rel), path in zip(manifest.device_list, device_paths):
        devices.append(build_device(read_ini_file(path), rel))

    trace = None
    if manifest.trace_metadata:
        trace = build_trace_metadata(read_ini_file(trace_path), manifest.trace_metadata)

    logger.info(
        "Built snapshot %s: %d devices%s",
        snapshot_dir, len(devices), ", with trace metadata" if trace else "",
    )
    return canonicalize(Snapshot(
        snapshot_dir=snapshot_dir,
        manifest=manifest,
        devices=tuple(devices),
        trace=trace,
    ))


def _write_output(output: Path, content: str) -> None:
    try:
        output.write_bytes(content.encode("utf-8"))
    except OSError as exc:
        raise SnapshotError(
            ErrorCode.FILE_OPEN,
            "failed to open output file ({})".format(exc.strerror or exc),
            source=str(output),
        ) from exc


def run_snapshot_dump(
    snapshot_dir: str,
    output_file: str,
    validator: SnapshotValidator | None = None,
    path_sep: str | None = None,
    writer: BaseWriter | None = None,
) -> DumpResult:
    """Dump a snapshot directory to output_file.

    WHY: This is the one call the CLI makes. Returning a DumpResult
    rather than raising keeps error-to-exit-code mapping in the CLI.

    HOW: build_snapshot(), render with the writer, then write the bytes.
    Any SnapshotError on the way is logged and returned.

    Args:
        snapshot_dir: The snapshot directory.
        output_file: Path of the dump file to create or overwrite.
        validator: See build_snapshot().
        path_sep: See build_snapshot().
        writer: Writer instance; defaults to the registered DEFAULT_WRITER.

    Returns:
        DumpResult with output_path set on success, error set on failure.
    """
    if writer is None:
        writer = WRITERS[DEFAULT_WRITER]()
    output = Path(output_file)
    snapshot = None
    try:
        snapshot = build_snapshot(snapshot_dir, validator=validator, path_sep=path_sep)
        rendered = writer.render(snapshot)
        _write_output(output, rendered.content)
    except SnapshotError as exc:
        logger.info("Snapshot dump failed (%s): %s", exc.code.value, exc)
        return DumpResult(error=exc, snapshot=snapshot)

    logger.info("Wrote %s dump to %s", writer.name, output)
    return DumpResult(output_path=output, snapshot=snapshot)
