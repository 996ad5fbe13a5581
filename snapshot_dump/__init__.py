"""Snapshot Parse Dump — canonical text dumps of trace capture snapshots.

WHY: A trace snapshot is a directory of INI-dialect files (a snapshot.ini
manifest, one file per device, an optional trace metadata file). Tools
that consume snapshots must agree on how that dialect is read. This
package parses a snapshot into a typed model and writes a deterministic,
byte-stable dump that two implementations can diff against each other.

HOW: Four-stage pipeline: parse (INI documents), build (typed snapshot
model), canonicalize (sort and dedup), write (text dump). Each stage is
independently testable.

RULES:
- Every parse or semantic error is fatal; there is no partial output
- The dump depends only on snapshot content, never on declaration order
- The model is the stable contract between building and writing
"""

__version__ = "0.1.0"
