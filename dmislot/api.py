from __future__ import annotations
from typing import List, Optional, Union
from .sysfs import FirmwareTables, PathLike, resolve_paths
from .types import MatchExact, PciAddress, SlotMatch


def find_slot_name(
    address: Union[PciAddress, str],
    entry_point: Optional[PathLike] = None,
    dmi_table: Optional[PathLike] = None,
) -> Optional[str]:
    if isinstance(address, str):
        address = PciAddress.parse(address)
    tables = FirmwareTables.load(resolve_paths(entry_point, dmi_table))
    return tables.scan(MatchExact(address))


def list_slots(
    entry_point: Optional[PathLike] = None, dmi_table: Optional[PathLike] = None
) -> List[SlotMatch]:
    return FirmwareTables.load(resolve_paths(entry_point, dmi_table)).scan_all()


__all__ = ["find_slot_name", "list_slots"]
