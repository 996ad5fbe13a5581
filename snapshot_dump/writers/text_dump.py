"""Line-oriented text dump of a canonical snapshot.

WHY: The dump is what two snapshot readers diff against each other, so
it must be trivially parseable and carry every field the model holds,
empty ones included. Any ordering logic here would defeat the point of
canonicalize(); this writer only walks the model.

HOW: A single pass emitting "key = value" lines. Repeated records start
with a "[[table]]" marker, and every repeated block is preceded by its
count. The trace section is emitted only when the snapshot names a
trace metadata file; clusters only when there are any.

RULES:
- Every line ends in "\\n", including the last
- Paths are written with forward slashes; snapshot_dir additionally
  loses trailing slashes
- Register lines always carry " ; meta: id=<id> size=<size>", with empty
  fields when the register has no metadata
- Cluster and file lists are re-joined with "," and no spaces
- Output suffix: none; the caller picks the output path
- Media type: "text/plain"
"""

from __future__ import annotations

from snapshot_dump.config import SNAPSHOT_INI_NAME
from snapshot_dump.core.model import Device, Snapshot, TraceMetadata
from snapshot_dump.core.text import join_comma_list, normalize_path, split_comma_list
from snapshot_dump.writers.base import BaseWriter, WriterOutput


def _kv(lines: list[str], key: str, value: object) -> None:
    lines.append("{} = {}".format(key, value))


def _write_device(lines: list[str], device: Device) -> None:
    lines.append("[[device]]")
    _kv(lines, "name", device.name)
    _kv(lines, "class", device.class_name)
    _kv(lines, "type", device.type_name)
    _kv(lines, "location", device.location)
    _kv(lines, "ini", device.ini_path)
    _kv(lines, "regs.count", len(device.registers))
    _kv(lines, "dump.count", len(device.dumps))

    for reg in device.registers:
        lines.append("reg.{} = {} ; meta: id={} size={}".format(
            reg.name, reg.value, reg.reg_id or "", reg.size or "",
        ))

    for dump in device.dumps:
        lines.append("[[dump]]")
        _kv(lines, "section", dump.section)
        _kv(lines, "file", dump.file)
        _kv(lines, "space", dump.space)
        _kv(lines, "address", dump.address)
        _kv(lines, "length", dump.length)
        _kv(lines, "offset", dump.offset)


def _write_trace(lines: list[str], trace: TraceMetadata) -> None:
    _kv(lines, "trace.metadata", normalize_path(trace.path))
    _kv(lines, "trace_buffers.ids", join_comma_list(trace.buffer_ids))

    for buf in trace.buffers:
        lines.append("[[trace_buffer]]")
        _kv(lines, "id", buf.buffer_id)
        _kv(lines, "name", buf.name)
        _kv(lines, "format", buf.format)
        _kv(lines, "files", join_comma_list(buf.files))

    for core, source in trace.core_trace_sources:
        lines.append("[[core_trace_source]]")
        _kv(lines, "core", core)
        _kv(lines, "source", source)

    for source, buffers in trace.source_buffers:
        lines.append("[[source_buffer]]")
        _kv(lines, "source", source)
        _kv(lines, "buffers", buffers)


def render_dump(snapshot: Snapshot) -> str:
    """Render a canonical snapshot as dump text."""
    manifest = snapshot.manifest
    lines: list[str] = []

    _kv(lines, "snapshot_dir", normalize_path(snapshot.snapshot_dir, strip_trailing=True))
    _kv(lines, "snapshot_ini", SNAPSHOT_INI_NAME)
    _kv(lines, "snapshot.version", manifest.version)
    _kv(lines, "snapshot.description", manifest.description)

    _kv(lines, "device_list.count", len(manifest.device_list))
    for key, path in manifest.device_list:
        _kv(lines, "device_list.{}".format(key), normalize_path(path))

    for device in snapshot.devices:
        _write_device(lines, device)

    if manifest.clusters:
        _kv(lines, "clusters.count", len(manifest.clusters))
        for key, members in manifest.clusters:
            _kv(lines, "cluster.{}".format(key), join_comma_list(split_comma_list(members)))

    if snapshot.trace is not None:
        _write_trace(lines, snapshot.trace)

    return "".join(line + "\n" for line in lines)


class TextDumpWriter(BaseWriter):
    """Writer producing the canonical line-oriented text dump."""

    @property
    def name(self) -> str:
        return "Text Dump"

    def render(self, snapshot: Snapshot) -> WriterOutput:
        return WriterOutput(content=render_dump(snapshot), media_type="text/plain")
