"""Deterministic ordering of the snapshot model.

WHY: Two snapshots with the same content must dump to the same bytes,
whatever order their files declare devices, registers, dump sections or
trace mappings in. This pass is the only place ordering decisions are
made; the writer just walks the result.

HOW: Pure functions returning new frozen entities (dataclasses.replace).
Python's sort is stable, so "ascending by key" keeps declaration order
among equal keys.

RULES:
- Devices: by name, then ini path
- Device list and clusters: by key
- Registers: by name; registers without an id before those with one;
  numeric ids before textual ids, numeric ids by value then raw text,
  textual ids by raw text; then by declaration order
- Memory dumps: by section name, then numeric address
- Trace buffer ids: deduplicated, ascending; buffers follow the ids
- Core trace sources and source buffers: by key
- canonicalize() is idempotent
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from snapshot_dump.core.model import (
    Device,
    KeyValue,
    Manifest,
    MemoryDump,
    RegisterValue,
    Snapshot,
    TraceMetadata,
)


def _by_key(pairs: Iterable[KeyValue]) -> tuple[KeyValue, ...]:
    return tuple(sorted(pairs, key=lambda kv: kv[0]))


def register_sort_key(reg: RegisterValue) -> tuple:
    """Total-order sort key for a register.

    RULES:
    - name first
    - registers without an id come before those with one
    - numeric ids come before textual ids; numeric ids compare by value,
      then raw text
    - textual ids compare by raw text
    - declaration order breaks remaining ties
    """
    if reg.reg_id is None:
        id_key: tuple = (0,)
    elif reg.reg_id_num is not None:
        id_key = (1, reg.reg_id_num, reg.reg_id)
    else:
        id_key = (2, reg.reg_id)
    return (reg.name, id_key, reg.order)


def _sort_registers(registers: Iterable[RegisterValue]) -> tuple[RegisterValue, ...]:
    return tuple(sorted(registers, key=register_sort_key))


def compare_registers(a: RegisterValue, b: RegisterValue) -> int:
    """Three-way comparison of two registers (negative: a first)."""
    ka, kb = register_sort_key(a), register_sort_key(b)
    return (ka > kb) - (ka < kb)


def _sort_dumps(dumps: Iterable[MemoryDump]) -> tuple[MemoryDump, ...]:
    return tuple(sorted(dumps, key=lambda d: (d.section, d.address_value)))


def canonicalize_device(device: Device) -> Device:
    return replace(
        device,
        registers=_sort_registers(device.registers),
        dumps=_sort_dumps(device.dumps),
    )


def canonicalize_manifest(manifest: Manifest) -> Manifest:
    return replace(
        manifest,
        device_list=_by_key(manifest.device_list),
        clusters=_by_key(manifest.clusters),
    )


def canonicalize_trace(trace: TraceMetadata | None) -> TraceMetadata | None:
    if trace is None:
        return None
    buffer_ids = tuple(sorted(set(trace.buffer_ids)))
    by_id = {b.buffer_id: b for b in trace.buffers}
    return replace(
        trace,
        buffer_ids=buffer_ids,
        buffers=tuple(by_id[i] for i in buffer_ids if i in by_id),
        core_trace_sources=_by_key(trace.core_trace_sources),
        source_buffers=_by_key(trace.source_buffers),
    )


def canonicalize(snapshot: Snapshot) -> Snapshot:
    """Return a copy of snapshot with every collection in canonical order."""
    devices = sorted(
        (canonicalize_device(d) for d in snapshot.devices),
        key=lambda d: (d.name, d.ini_path),
    )
    return replace(
        snapshot,
        manifest=canonicalize_manifest(snapshot.manifest),
        devices=tuple(devices),
        trace=canonicalize_trace(snapshot.trace),
    )
