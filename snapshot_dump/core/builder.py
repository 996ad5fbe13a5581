"""Build the typed snapshot model from parsed INI documents.

WHY: The INI parser knows nothing about what a snapshot means. Each of
the three file roles has its own required sections, required keys and
single-valued keys, and a few values need more than trimming: register
keys carry an optional "(id, size:N)" metadata suffix, dump addresses
are integers, trace buffer files are comma lists of quoted paths. This
module is where those rules live.

HOW: Three independent build functions, one per file role:
  build_manifest()       — snapshot.ini → Manifest
  build_device()         — one device file → Device
  build_trace_metadata() — the trace metadata file → TraceMetadata
Each takes an IniDocument and raises SnapshotError on the first rule it
finds broken. parse_register_key() is exposed for direct testing.

RULES:
- [snapshot] version: required, exactly once, non-empty
- [snapshot] description: optional, at most once
- [device_list]: required; [clusters], [trace] metadata: optional
- [device] name: required, exactly once; class/type/location optional
- every section named dump* is one memory dump: file and address
  required, address must parse as an unsigned integer
- [trace_buffers] buffers: required, non-empty; every id needs a section
  with name and file
- Repeated keys in sections without a uniqueness rule: last one wins
"""

from __future__ import annotations

import logging

from snapshot_dump.core.ini import IniDocument
from snapshot_dump.core.model import (
    Device,
    KeyValue,
    Manifest,
    MemoryDump,
    RegisterValue,
    TraceBuffer,
    TraceMetadata,
)
from snapshot_dump.core.text import (
    join_comma_list,
    normalize_path,
    parse_unsigned,
    split_comma_list,
    strip_quotes,
    trim,
)
from snapshot_dump.errors import ErrorCode, SnapshotError

logger = logging.getLogger(__name__)

# snapshot.ini
SNAPSHOT_SECTION = "snapshot"
VERSION_KEY = "version"
DESCRIPTION_KEY = "description"
DEVICE_LIST_SECTION = "device_list"
CLUSTERS_SECTION = "clusters"
TRACE_SECTION = "trace"
METADATA_KEY = "metadata"

# device files
DEVICE_SECTION = "device"
DEVICE_NAME_KEY = "name"
DEVICE_CLASS_KEY = "class"
DEVICE_TYPE_KEY = "type"
DEVICE_LOCATION_KEY = "location"
REGS_SECTION = "regs"
DUMP_SECTION_PREFIX = "dump"

# trace metadata
TRACE_BUFFERS_SECTION = "trace_buffers"
BUFFER_LIST_KEY = "buffers"
BUFFER_NAME_KEY = "name"
BUFFER_FILE_KEY = "file"
BUFFER_FORMAT_KEY = "format"
CORE_TRACE_SOURCES_SECTION = "core_trace_sources"
SOURCE_BUFFERS_SECTION = "source_buffers"


def _single_value(
    doc: IniDocument,
    section: str,
    key: str,
    required: bool,
) -> str | None:
    """Return the only value of a single-valued key.

    Raises:
        SnapshotError: DUPLICATE_KEY if the key appears more than once,
            MISSING_KEY if required and absent or empty.
    """
    values = doc.values(section, key)
    if len(values) > 1:
        raise SnapshotError(
            ErrorCode.DUPLICATE_KEY,
            "duplicate {} key in [{}]".format(key, section),
            source=doc.source,
        )
    value = values[0] if values else None
    if required and not value:
        raise SnapshotError(
            ErrorCode.MISSING_KEY,
            "missing required [{}] {}".format(section, key),
            source=doc.source,
        )
    return value


def _last_values(doc: IniDocument, section: str) -> dict[str, str]:
    """Collapse a section to key → last declared value."""
    result: dict[str, str] = {}
    for entry in doc.entries(section):
        result[entry.key] = entry.value
    return result


def _require_section(doc: IniDocument, section: str) -> None:
    if not doc.has_section(section):
        raise SnapshotError(
            ErrorCode.MISSING_SECTION,
            "missing required [{}] section".format(section),
            source=doc.source,
        )


def _pairs(doc: IniDocument, section: str) -> tuple[KeyValue, ...]:
    return tuple((e.key, e.value) for e in doc.entries(section))


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


def build_manifest(doc: IniDocument) -> Manifest:
    """Interpret snapshot.ini.

    Args:
        doc: The parsed manifest.

    Returns:
        Manifest with entries in declaration order (not yet canonical).

    Raises:
        SnapshotError: on a missing [snapshot] version, a duplicated
            version or description, or a missing [device_list].
    """
    if not doc.has_section(SNAPSHOT_SECTION):
        raise SnapshotError(
            ErrorCode.MISSING_SECTION,
            "missing required [snapshot] version",
            source=doc.source,
        )
    version = _single_value(doc, SNAPSHOT_SECTION, VERSION_KEY, required=True)
    description = _single_value(doc, SNAPSHOT_SECTION, DESCRIPTION_KEY, required=False)

    _require_section(doc, DEVICE_LIST_SECTION)

    # First metadata key wins; an empty value means no trace metadata.
    trace_metadata = doc.first(TRACE_SECTION, METADATA_KEY) or None

    manifest = Manifest(
        version=version or "",
        description=description or "",
        device_list=_pairs(doc, DEVICE_LIST_SECTION),
        clusters=_pairs(doc, CLUSTERS_SECTION),
        trace_metadata=trace_metadata,
    )
    logger.debug(
        "Manifest %s: version %s, %d devices, %d clusters, trace metadata %s",
        doc.source, manifest.version, len(manifest.device_list),
        len(manifest.clusters), manifest.trace_metadata,
    )
    return manifest


# ---------------------------------------------------------------------------
# Devices
# ---------------------------------------------------------------------------


def parse_register_key(raw: str) -> tuple[str, str | None, str | None]:
    """Split a [regs] key into (name, id, size).

    WHY: Register keys may carry metadata, e.g. "PMU(id:3,size:4)" or
    "TRCIDR(0x21)". The name is what the dump shows; the id drives
    ordering when two registers share a name.

    HOW: The name is the trimmed text before the first "(". If the last
    ")" comes after that "(", the text between them is a comma list of
    tokens: "key:value" sets id or size (other keys are ignored), a bare
    token is the id if no id has been set yet.

    RULES:
    - no "(" or no ")" after it → the whole trimmed key is the name
    - "id:" and "size:" tokens overwrite earlier values
    - a bare token never overwrites an id that is already set
    """
    open_pos = raw.find("(")
    close_pos = raw.rfind(")")
    if open_pos == -1 or close_pos == -1 or close_pos <= open_pos:
        return trim(raw), None, None

    name = trim(raw[:open_pos])
    reg_id: str | None = None
    size: str | None = None
    for token in split_comma_list(raw[open_pos + 1:close_pos]):
        colon = token.find(":")
        if colon != -1:
            key = trim(token[:colon])
            value = trim(token[colon + 1:])
            if key == "id":
                reg_id = value
            elif key == "size":
                size = value
        elif reg_id is None:
            reg_id = token
    return name, reg_id, size


def _build_registers(doc: IniDocument) -> list[RegisterValue]:
    registers = []
    for order, entry in enumerate(doc.entries(REGS_SECTION)):
        name, reg_id, size = parse_register_key(entry.key)
        registers.append(RegisterValue(
            name=name,
            value=strip_quotes(entry.value),
            reg_id=reg_id,
            reg_id_num=parse_unsigned(reg_id) if reg_id is not None else None,
            size=size,
            order=order,
        ))
    return registers


def _build_dump(doc: IniDocument, section: str, ini_path: str) -> MemoryDump:
    location = "{}/{}".format(ini_path, section)

    # Every address entry must parse, even ones a later entry overrides.
    fields: dict[str, str] = {}
    address_value = None
    for entry in doc.entries(section):
        fields[entry.key] = entry.value
        if entry.key == "address":
            address_value = parse_unsigned(trim(entry.value))
            if address_value is None:
                raise SnapshotError(
                    ErrorCode.INVALID_VALUE,
                    "invalid dump address '{}' in {}".format(trim(entry.value), location),
                    source=doc.source,
                )

    if "file" not in fields or address_value is None:
        raise SnapshotError(
            ErrorCode.MISSING_KEY,
            "dump section missing file or address: {}".format(location),
            source=doc.source,
        )

    return MemoryDump(
        section=section,
        file=normalize_path(strip_quotes(fields["file"])),
        address=trim(fields["address"]),
        address_value=address_value,
        space=strip_quotes(fields.get("space", "")),
        length=trim(fields.get("length", "")),
        offset=trim(fields.get("offset", "")),
    )


def build_device(doc: IniDocument, ini_path: str) -> Device:
    """Interpret one device file.

    Args:
        doc: The parsed device file.
        ini_path: The path as declared in [device_list]; stored with
            forward slashes and used in error messages.

    Returns:
        Device with registers and dumps in declaration order.

    Raises:
        SnapshotError: on a missing [device] section or name, a duplicated
            name, or an incomplete or invalid dump section.
    """
    display_path = normalize_path(ini_path)
    if not doc.has_section(DEVICE_SECTION):
        raise SnapshotError(
            ErrorCode.MISSING_SECTION,
            "device ini missing [device] section: {}".format(display_path),
            source=doc.source,
        )
    names = doc.values(DEVICE_SECTION, DEVICE_NAME_KEY)
    if not names:
        raise SnapshotError(
            ErrorCode.MISSING_KEY,
            "device ini missing [device] name: {}".format(display_path),
            source=doc.source,
        )
    if len(names) > 1:
        raise SnapshotError(
            ErrorCode.DUPLICATE_KEY,
            "duplicate name key in [device]: {}".format(display_path),
            source=doc.source,
        )

    fields = _last_values(doc, DEVICE_SECTION)
    dumps = [
        _build_dump(doc, section, display_path)
        for section in doc.section_names()
        if section.startswith(DUMP_SECTION_PREFIX)
    ]
    device = Device(
        name=names[0],
        ini_path=display_path,
        class_name=fields.get(DEVICE_CLASS_KEY, ""),
        type_name=fields.get(DEVICE_TYPE_KEY, ""),
        location=fields.get(DEVICE_LOCATION_KEY, ""),
        registers=tuple(_build_registers(doc)),
        dumps=tuple(dumps),
    )
    logger.debug(
        "Device %s from %s: %d registers, %d dumps",
        device.name, display_path, len(device.registers), len(device.dumps),
    )
    return device


# ---------------------------------------------------------------------------
# Trace metadata
# ---------------------------------------------------------------------------


def _build_buffer(doc: IniDocument, buffer_id: str) -> TraceBuffer:
    if not doc.has_section(buffer_id):
        raise SnapshotError(
            ErrorCode.DANGLING_REFERENCE,
            "missing buffer section: {}".format(buffer_id),
            source=doc.source,
        )
    fields = _last_values(doc, buffer_id)
    if BUFFER_NAME_KEY not in fields or BUFFER_FILE_KEY not in fields:
        raise SnapshotError(
            ErrorCode.MISSING_KEY,
            "trace buffer section missing name or file: {}".format(buffer_id),
            source=doc.source,
        )
    files = tuple(
        normalize_path(strip_quotes(f))
        for f in split_comma_list(fields[BUFFER_FILE_KEY])
    )
    if not files:
        raise SnapshotError(
            ErrorCode.EMPTY_LIST,
            "trace buffer section has an empty file list: {}".format(buffer_id),
            source=doc.source,
        )
    return TraceBuffer(
        buffer_id=buffer_id,
        name=fields[BUFFER_NAME_KEY],
        files=files,
        format=fields.get(BUFFER_FORMAT_KEY, ""),
    )


def build_trace_metadata(doc: IniDocument, path: str) -> TraceMetadata:
    """Interpret the trace metadata file.

    WHY: Trace metadata names the captured trace buffers and how trace
    sources map to cores and buffers. The buffer list is the index into
    the rest of the file, so it is validated first.

    HOW: Read the first "buffers" key of [trace_buffers], dedupe and sort
    the ids, then build one TraceBuffer per id from the section of the
    same name. Cross-reference sections are captured as flat pairs;
    source_buffers values are re-joined without spaces.

    Args:
        doc: The parsed trace metadata file.
        path: The path as declared in [trace] metadata.

    Raises:
        SnapshotError: on a missing [trace_buffers] section or buffers
            key, an empty id list, a missing buffer section, or a buffer
            section without name or file.
    """
    if not doc.has_section(TRACE_BUFFERS_SECTION):
        raise SnapshotError(
            ErrorCode.MISSING_SECTION,
            "missing required [trace_buffers] section in {}".format(path),
            source=doc.source,
        )
    buffers_value = doc.first(TRACE_BUFFERS_SECTION, BUFFER_LIST_KEY)
    if buffers_value is None:
        raise SnapshotError(
            ErrorCode.MISSING_KEY,
            "trace metadata missing buffers list: {}".format(path),
            source=doc.source,
        )
    buffer_ids = sorted(set(split_comma_list(buffers_value)))
    if not buffer_ids:
        raise SnapshotError(
            ErrorCode.EMPTY_LIST,
            "trace metadata has an empty buffers list: {}".format(path),
            source=doc.source,
        )

    source_buffers = tuple(
        (e.key, join_comma_list(split_comma_list(e.value)))
        for e in doc.entries(SOURCE_BUFFERS_SECTION)
    )

    trace = TraceMetadata(
        path=path,
        buffer_ids=tuple(buffer_ids),
        buffers=tuple(_build_buffer(doc, b) for b in buffer_ids),
        core_trace_sources=_pairs(doc, CORE_TRACE_SOURCES_SECTION),
        source_buffers=source_buffers,
    )
    logger.debug(
        "Trace metadata %s: buffers %s, %d core sources, %d source buffers",
        path, ",".join(trace.buffer_ids), len(trace.core_trace_sources),
        len(trace.source_buffers),
    )
    return trace
