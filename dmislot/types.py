# dmislot/types.py
from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, Tuple, Union
import enum
import re

_SBDF_RE = re.compile(
    r"^([0-9a-fA-F]{1,4}):([0-9a-fA-F]{1,2}):([0-9a-fA-F]{1,2})\.([0-9a-fA-F])$"
)


@dataclass(frozen=True, slots=True)
class PciAddress:
    segment: int
    bus: int
    device: int
    function: int

    def __post_init__(self) -> None:
        if not 0 <= self.segment <= 0xFFFF:
            raise ValueError(f"segment out of range: {self.segment:#x}")
        if not 0 <= self.bus <= 0xFF:
            raise ValueError(f"bus out of range: {self.bus:#x}")
        if not 0 <= self.device <= 0x1F:
            raise ValueError(f"device out of range: {self.device:#x}")
        if not 0 <= self.function <= 0x7:
            raise ValueError(f"function out of range: {self.function:#x}")

    @classmethod
    def from_devfn(cls, segment: int, bus: int, devfn: int) -> "PciAddress":
        # devfn packs device in bits 7:3 and function in bits 2:0
        return cls(segment, bus, (devfn >> 3) & 0x1F, devfn & 0x7)

    @classmethod
    def parse(cls, text: str) -> "PciAddress":
        """Parse ``SSSS:BB:DD.F`` (hex) as accepted by ``dmiprint -p``."""
        m = _SBDF_RE.match(text.strip())
        if m is None:
            raise ValueError(f"invalid sBDF: {text!r}")
        seg, bus, dev, fn = (int(g, 16) for g in m.groups())
        return cls(seg, bus, dev, fn)

    def slot_format(self) -> str:
        # listing form used by `dmiprint --all`
        return f"{self.segment:04x}.{self.bus:02x}:{self.device:02x}.{self.function:x}"

    def __str__(self) -> str:
        return f"{self.segment:04x}:{self.bus:02x}:{self.device:02x}.{self.function:x}"


class EntryPointFormat(enum.Enum):
    THIRTY_TWO_BIT = "32-bit"
    SIXTY_FOUR_BIT = "64-bit"


@dataclass(frozen=True)
class TableDescriptor:
    version: Tuple[int, int, int]
    table_len: int
    table_addr: int
    format: EntryPointFormat
    entry_len: int = 0
    checksum: int = 0

    @property
    def version_string(self) -> str:
        return ".".join(str(v) for v in self.version)


@dataclass(frozen=True)
class MatchAll:
    pass


@dataclass(frozen=True)
class MatchExact:
    address: PciAddress


SlotQuery = Union[MatchAll, MatchExact]


class SlotMatch(NamedTuple):
    address: PciAddress
    name: str


__all__ = [
    "PciAddress",
    "EntryPointFormat",
    "TableDescriptor",
    "MatchAll",
    "MatchExact",
    "SlotQuery",
    "SlotMatch",
]
