"""Typed model of a parsed snapshot.

WHY: The raw INI documents say nothing about which keys matter, which
are required, or how values are typed. The builders turn them into these
entities once; the canonicalizer and the dump writer only ever see the
typed model, never raw INI text.

HOW: Frozen dataclasses with tuple collections, nested the way a
snapshot is owned:
  Snapshot       — one run: directory, manifest, devices, trace metadata
  Manifest       — snapshot.ini: version, description, device list, clusters
  Device         — one device file: identity, registers, memory dumps
  RegisterValue  — one [regs] entry with its parsed metadata suffix
  MemoryDump     — one [dump*] section
  TraceMetadata  — the trace metadata file: buffers and cross references
  TraceBuffer    — one buffer section

RULES:
- Entities are immutable once built; the canonicalizer builds new ones
- Optional free-text fields are "" when absent, so the writer can emit
  them without special cases
- Raw text is kept next to parsed numbers (address, register id) so the
  dump reproduces what the snapshot said
"""

from __future__ import annotations

from dataclasses import dataclass

KeyValue = tuple[str, str]


@dataclass(frozen=True)
class RegisterValue:
    """A register from a device's [regs] section.

    RULES:
    - name: key text before "(" (or the whole key), trimmed
    - value: the entry value with one matching quote pair removed
    - reg_id / size: raw strings from the metadata suffix, None if absent
    - reg_id_num: reg_id parsed as an unsigned integer, None if it is not
      numeric; used only for ordering
    - order: zero-based position in [regs]; used only as a tie-break
    """

    name: str
    value: str
    reg_id: str | None = None
    reg_id_num: int | None = None
    size: str | None = None
    order: int = 0


@dataclass(frozen=True)
class MemoryDump:
    """A memory region described by one [dump*] section."""

    section: str
    file: str
    address: str
    address_value: int
    space: str = ""
    length: str = ""
    offset: str = ""


@dataclass(frozen=True)
class Device:
    """One device file referenced from [device_list]."""

    name: str
    ini_path: str
    class_name: str = ""
    type_name: str = ""
    location: str = ""
    registers: tuple[RegisterValue, ...] = ()
    dumps: tuple[MemoryDump, ...] = ()


@dataclass(frozen=True)
class Manifest:
    """The snapshot.ini manifest.

    RULES:
    - device_list / clusters: (key, raw value) pairs as declared
    - trace_metadata: path of the trace metadata file, None if absent
    """

    version: str
    device_list: tuple[KeyValue, ...]
    description: str = ""
    clusters: tuple[KeyValue, ...] = ()
    trace_metadata: str | None = None


@dataclass(frozen=True)
class TraceBuffer:
    buffer_id: str
    name: str
    files: tuple[str, ...]
    format: str = ""


@dataclass(frozen=True)
class TraceMetadata:
    """The trace metadata file named by [trace] metadata.

    RULES:
    - buffer_ids: deduplicated, lexically sorted
    - buffers: one TraceBuffer per id, same order as buffer_ids
    - core_trace_sources: (core, source) pairs
    - source_buffers: (source, comma-joined buffer ids) pairs
    """

    path: str
    buffer_ids: tuple[str, ...]
    buffers: tuple[TraceBuffer, ...]
    core_trace_sources: tuple[KeyValue, ...] = ()
    source_buffers: tuple[KeyValue, ...] = ()


@dataclass(frozen=True)
class Snapshot:
    """Everything one run reads from a snapshot directory."""

    snapshot_dir: str
    manifest: Manifest
    devices: tuple[Device, ...] = ()
    trace: TraceMetadata | None = None
