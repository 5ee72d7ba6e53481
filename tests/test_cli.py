# tests/test_cli.py
from __future__ import annotations
import logging
from dmislot.cli_dmiprint import (
    EXIT_DECODE_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_NOT_FOUND,
    EXIT_OK,
    ProgramArgs,
    run,
)
from dmi_fixtures import make_ep32

expected_all_stdout = """\
0000.17:00.0\tPCIe Slot 1
0000.65:00.0\tPCIe Slot 2
0001.b3:01.2\tOCP
"""


def _args(tables, **kw) -> ProgramArgs:
    return ProgramArgs(
        entry_point=str(tables / "smbios_entry_point"),
        dmi_table=str(tables / "DMI"),
        pci=kw.pop("pci", None),
        **kw,
    )


def test_dmiprint_exact(capfd, fake_dmi_tables):
    assert run(_args(fake_dmi_tables, pci="0000:65:00.0")) == EXIT_OK
    out, err = capfd.readouterr()
    assert out == "PCIe Slot 2"
    assert err == ""


def test_dmiprint_not_found(capfd, fake_dmi_tables):
    assert run(_args(fake_dmi_tables, pci="0000:66:00.0")) == EXIT_NOT_FOUND
    out, err = capfd.readouterr()
    assert out == ""


def test_dmiprint_all(capfd, fake_dmi_tables):
    assert run(_args(fake_dmi_tables, all=True)) == EXIT_OK
    out, err = capfd.readouterr()
    assert out == expected_all_stdout


def test_dmiprint_all_no_slots_still_succeeds(capfd, tmp_path):
    table = b"\x7f\x04\xff\xfe\x00\x00"
    (tmp_path / "smbios_entry_point").write_bytes(make_ep32(len(table), 0xF0000))
    (tmp_path / "DMI").write_bytes(table)
    assert run(_args(tmp_path, all=True)) == EXIT_OK
    out, err = capfd.readouterr()
    assert out == ""


def test_dmiprint_env_paths(capfd, monkeypatch, fake_dmi_tables):
    monkeypatch.setenv("DMISLOT_ENTRY_POINT", str(fake_dmi_tables / "smbios_entry_point"))
    monkeypatch.setenv("DMISLOT_DMI_TABLE", str(fake_dmi_tables / "DMI"))
    args = ProgramArgs(entry_point=None, dmi_table=None, pci="0001:b3:01.2")
    assert run(args) == EXIT_OK
    out, err = capfd.readouterr()
    assert out == "OCP"


def test_dmiprint_bad_sbdf(capfd, fake_dmi_tables):
    assert run(_args(fake_dmi_tables, pci="65:00.0")) == EXIT_INPUT_ERROR
    out, err = capfd.readouterr()
    assert "invalid sBDF" in err


def test_dmiprint_missing_entry_point(capfd, tmp_path):
    assert run(_args(tmp_path, all=True)) == EXIT_INPUT_ERROR
    out, err = capfd.readouterr()
    assert err.startswith("ERROR: cannot open entry-point")


def test_dmiprint_bad_entry_point(capfd, fake_dmi_tables):
    (fake_dmi_tables / "smbios_entry_point").write_bytes(b"_DMI_" + b"\x00" * 27)
    assert run(_args(fake_dmi_tables, all=True)) == EXIT_DECODE_ERROR
    out, err = capfd.readouterr()
    assert "Bad SMBIOS entry point" in err


def test_dmiprint_checksum_flag(capfd, tmp_path):
    table = b"\x7f\x04\xff\xfe\x00\x00"
    (tmp_path / "smbios_entry_point").write_bytes(
        make_ep32(len(table), 0xF0000, checksum_ok=False)
    )
    (tmp_path / "DMI").write_bytes(table)
    assert run(_args(tmp_path, all=True)) == EXIT_OK
    assert run(_args(tmp_path, all=True, verify_checksum=True)) == EXIT_DECODE_ERROR
    out, err = capfd.readouterr()
    assert "checksum" in err


def test_dmiprint_corrupt_table(capfd, corrupt_dmi_tables):
    assert run(_args(corrupt_dmi_tables, all=True)) == EXIT_DECODE_ERROR
    out, err = capfd.readouterr()
    assert out == ""
    assert "entry overflow" in err
    assert "handle=0x0901" in err


def test_dmiprint_verbose_logs(caplog, capfd, fake_dmi_tables):
    caplog.set_level(logging.DEBUG, logger="dmislot")
    assert run(_args(fake_dmi_tables, pci="0000:17:00.0", verbose=True)) == EXIT_OK
    assert "Got 64-bit entry point" in caplog.text
    assert "PCI slot 'PCIe Slot 1' found!" in caplog.text
