"""Shared test fixtures for the snapshot_dump test suite.

WHY: Most tests need a snapshot directory on disk: a snapshot.ini, a few
device files, sometimes trace metadata. Building them in one place keeps
the file contents consistent and the tests short.

HOW: make_snapshot writes a dict of relative path → file content under
tmp_path and returns the directory. Canned file contents for the
standard scenarios are module-level constants.

RULES:
- All file I/O goes through tmp_path for isolation
- Fixture content uses "\\n" line endings
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

MINIMAL_SNAPSHOT_INI = """\
[snapshot]
version=1.0

[device_list]
core0=core0.ini
"""

MINIMAL_DEVICE_INI = """\
[device]
name=core0
"""

FULL_SNAPSHOT_INI = """\
; full snapshot used by ordering tests
[snapshot]
version = 1.0
description = Juno r1 capture

[device_list]
device1 = cpu_1.ini
device0 = cpu_0.ini
device2 = etm_0.ini

[clusters]
big = cpu_1, cpu_0
little = cpu_2

[trace]
metadata = trace.ini
"""

CPU0_INI = """\
[device]
name = cpu_0
class = core
type = Cortex-A57

[regs]
PC(size:64) = 0xFFFFFFC000096A00
SP(size:64) = 0xFFFFFFC00085FB40
R0(id:10) = 0
R0(id:9) = 1
PMU(id:3,size:4) = "0x10"

[dump2]
file = mem\\kernel.bin
address = 0x2000
length = 0x1000

[dump1]
file = "mem/vectors.bin"
space = "EL1N"
address = 0x1000
offset = 0x0
"""

CPU1_INI = """\
[device]
name = cpu_1
class = core
type = Cortex-A53
"""

ETM0_INI = """\
[device]
name = ETM_0
class = trace_source
type = ETM4

[regs]
TRCCONFIGR(0x004) = 0x000000C1
TRCTRACEIDR(0x010) = 0x00000010
"""

TRACE_INI = """\
[trace_buffers]
buffers = buffer1, buffer0, buffer1

[buffer0]
name = ETB_0
file = cstrace.bin
format = coresight

[buffer1]
name = ETF_0
file = "etf\\a.bin", 'etf/b.bin'

[core_trace_sources]
cpu_1 = ETM_1
cpu_0 = ETM_0

[source_buffers]
ETM_1 = ETF_0
ETM_0 = ETB_0 ,  ETF_0
"""

FULL_SNAPSHOT_FILES: dict[str, str] = {
    "snapshot.ini": FULL_SNAPSHOT_INI,
    "cpu_0.ini": CPU0_INI,
    "cpu_1.ini": CPU1_INI,
    "etm_0.ini": ETM0_INI,
    "trace.ini": TRACE_INI,
}


def write_files(root: Path, files: dict[str, str]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
    return root


@pytest.fixture
def make_snapshot(tmp_path) -> Callable[..., Path]:
    """Factory writing a snapshot directory; returns its path."""
    counter = {"n": 0}

    def _make(files: dict[str, str], name: str = "") -> Path:
        counter["n"] += 1
        return write_files(tmp_path / (name or "ss{}".format(counter["n"])), files)

    return _make


@pytest.fixture
def minimal_snapshot(make_snapshot) -> Path:
    return make_snapshot({
        "snapshot.ini": MINIMAL_SNAPSHOT_INI,
        "core0.ini": MINIMAL_DEVICE_INI,
    }, name="minimal")


@pytest.fixture
def full_snapshot(make_snapshot) -> Path:
    return make_snapshot(FULL_SNAPSHOT_FILES, name="full")
