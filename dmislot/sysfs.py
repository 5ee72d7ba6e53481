# dmislot/sysfs.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union
import logging
import os

from .entrypoint import EntryPointParser
from .errors import SourceError
from .table import StructureTableWalker
from .types import SlotMatch, SlotQuery, TableDescriptor

log = logging.getLogger(__name__)

SYSFS_ENTRY_POINT_DEFAULT = "/sys/firmware/dmi/tables/smbios_entry_point"
SYSFS_DMI_TABLE_DEFAULT = "/sys/firmware/dmi/tables/DMI"

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class TablePaths:
    entry_point: Path
    dmi_table: Path


def resolve_paths(
    entry_point: Optional[PathLike] = None, dmi_table: Optional[PathLike] = None
) -> TablePaths:
    """
    Explicit argument > DMISLOT_ENTRY_POINT / DMISLOT_DMI_TABLE > sysfs.
    """
    ep = entry_point or os.getenv("DMISLOT_ENTRY_POINT") or SYSFS_ENTRY_POINT_DEFAULT
    dmi = dmi_table or os.getenv("DMISLOT_DMI_TABLE") or SYSFS_DMI_TABLE_DEFAULT
    return TablePaths(Path(ep), Path(dmi))


def read_entry_point(path: PathLike) -> bytes:
    log.debug("Opening entry-point at %s", path)
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SourceError(f"cannot open entry-point: {e.strerror or e}") from e


def read_table(path: PathLike, length: int) -> bytes:
    log.debug("Opening DMI structure table at %s (%d bytes)", path, length)
    try:
        with open(path, "rb") as f:
            data = f.read(length)
    except OSError as e:
        raise SourceError(f"cannot open DMI structure file: {e.strerror or e}") from e
    if len(data) < length:
        raise SourceError(
            f"cannot read SMBIOS file {path}: got {len(data)} of {length} bytes"
        )
    return data


@dataclass(frozen=True)
class FirmwareTables:
    descriptor: TableDescriptor
    table: bytes

    @classmethod
    def load(
        cls, paths: Optional[TablePaths] = None, verify_checksum: bool = False
    ) -> "FirmwareTables":
        paths = paths or resolve_paths()
        descriptor = EntryPointParser(verify_checksum=verify_checksum).parse(
            read_entry_point(paths.entry_point)
        )
        log.debug(
            "Entry point is SMBIOS %s , len=%d",
            descriptor.version_string,
            descriptor.table_len,
        )
        return cls(descriptor, read_table(paths.dmi_table, descriptor.table_len))

    def scan(self, query: SlotQuery) -> Optional[str]:
        return StructureTableWalker().scan(self.table, self.descriptor.table_len, query)

    def scan_all(self) -> List[SlotMatch]:
        return StructureTableWalker().scan_all(self.table, self.descriptor.table_len)


__all__ = [
    "SYSFS_ENTRY_POINT_DEFAULT",
    "SYSFS_DMI_TABLE_DEFAULT",
    "TablePaths",
    "resolve_paths",
    "read_entry_point",
    "read_table",
    "FirmwareTables",
]
