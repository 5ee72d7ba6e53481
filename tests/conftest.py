# tests/conftest.py
from __future__ import annotations
from pathlib import Path
import pytest

from dmi_fixtures import (
    bios_info,
    end_of_table,
    make_ep32,
    make_ep64,
    make_slot,
    make_structure,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DMISLOT_ENTRY_POINT", "DMISLOT_DMI_TABLE", "DMISLOT_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def server_table() -> bytes:
    """
    A small but realistic table: BIOS info, an ISA slot (no PCI fields
    decoded), three PCIe slots, a legacy 2.5-era slot, end-of-table.
    """
    return b"".join(
        [
            bios_info(0x0000),
            make_slot(0x0900, name="ISA1", slot_type=0x03, bus=0x00, devfn=0x00),
            make_slot(0x0901, name="PCIe Slot 1", slot_type=0xA6, bus=0x17, devfn=0x00),
            make_slot(0x0902, name="PCIe Slot 2", slot_type=0xB6, bus=0x65, devfn=0x00),
            make_slot(
                0x0903,
                name="OCP",
                slot_type=0x22,
                segment=0x0001,
                bus=0xB3,
                devfn=0x0A,
            ),
            make_slot(0x0904, name="Legacy", length=0x0D),
            make_structure(0x20, 0x2000, b"\x00" * 7),  # system boot info
            end_of_table(),
        ]
    )


def _write_tables(root: Path, ep: bytes, table: bytes) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "smbios_entry_point").write_bytes(ep)
    (root / "DMI").write_bytes(table)
    return root


@pytest.fixture
def fake_dmi_tables(tmp_path: Path, server_table: bytes) -> Path:
    """Imitates /sys/firmware/dmi/tables with a 64-bit entry point."""
    return _write_tables(
        tmp_path / "tables", make_ep64(len(server_table), 0x7AE4B000), server_table
    )


@pytest.fixture
def fake_dmi_tables_32(tmp_path: Path) -> Path:
    table = make_slot(0x0900) + end_of_table()
    return _write_tables(tmp_path / "tables32", make_ep32(len(table), 0x000F0000), table)


@pytest.fixture
def corrupt_dmi_tables(tmp_path: Path) -> Path:
    # a valid slot followed by a record whose length runs off the table
    table = make_slot(0x0900) + bytes([0x09, 0x40, 0x01, 0x09]) + b"\x00" * 8
    return _write_tables(tmp_path / "corrupt", make_ep64(len(table), 0x1000), table)
