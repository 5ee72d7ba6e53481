"""
dmislot — find the SMBIOS System Slot (type 9) that holds a PCI device.

Public API:
    - Decoding:
        EntryPointParser, parse_entry_point
        StructureTableWalker, StructureRecord, iter_records, scan, scan_all
    - Types:
        PciAddress, TableDescriptor, EntryPointFormat,
        MatchAll, MatchExact, SlotQuery, SlotMatch
    - Firmware files (Linux sysfs):
        FirmwareTables, resolve_paths, find_slot_name, list_slots
    - Errors:
        DecodeError and its subclasses, SourceError
"""

from __future__ import annotations

# Version from installed dist; falls back to dev string when run from source tree.
try:
    from importlib.metadata import version, PackageNotFoundError
except Exception:  # pragma: no cover
    version = None  # type: ignore[assignment]
    PackageNotFoundError = Exception  # type: ignore[misc]

try:  # pragma: no cover
    __version__ = version("dmislot")
except (PackageNotFoundError, Exception):  # pragma: no cover
    __version__ = "0.0.0.dev0"

# Public API re-exports
from .types import (
    PciAddress,
    TableDescriptor,
    EntryPointFormat,
    MatchAll,
    MatchExact,
    SlotQuery,
    SlotMatch,
)
from .errors import (
    DecodeError,
    OutOfBounds,
    EntryPointError,
    TooShort,
    BadSignature,
    BadLength,
    Truncated,
    BadChecksum,
    TableError,
    MalformedRecord,
    RecordOverflow,
    StringTableOverflow,
    SourceError,
)
from .entrypoint import EntryPointParser, parse_entry_point
from .table import StructureRecord, StructureTableWalker, iter_records, scan, scan_all
from .sysfs import FirmwareTables, TablePaths, resolve_paths
from .api import find_slot_name, list_slots

__all__ = [
    "__version__",
    # types
    "PciAddress",
    "TableDescriptor",
    "EntryPointFormat",
    "MatchAll",
    "MatchExact",
    "SlotQuery",
    "SlotMatch",
    # errors
    "DecodeError",
    "OutOfBounds",
    "EntryPointError",
    "TooShort",
    "BadSignature",
    "BadLength",
    "Truncated",
    "BadChecksum",
    "TableError",
    "MalformedRecord",
    "RecordOverflow",
    "StringTableOverflow",
    "SourceError",
    # decoding
    "EntryPointParser",
    "parse_entry_point",
    "StructureRecord",
    "StructureTableWalker",
    "iter_records",
    "scan",
    "scan_all",
    # firmware files
    "FirmwareTables",
    "TablePaths",
    "resolve_paths",
    "find_slot_name",
    "list_slots",
]
