#!/usr/bin/python
#
# Python dmislot library
# SMBIOS structure table walker
#
# (c) 2025 Steven Noonan
# Licensed under the MIT license
#
# This is by no means a full decoder; it walks every structure to stay
# in sync but only looks inside type 9 (System Slot) records.
#

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .binary import Buffer, read_u8_at, read_u16le_at
from .errors import MalformedRecord, RecordOverflow, StringTableOverflow
from .types import MatchAll, MatchExact, PciAddress, SlotMatch, SlotQuery

HEADER_SIZE = 4
MAX_STRINGS = 255

SYSTEM_SLOT_TYPE = 9
SLOT_MIN_LEN_BDF = 0x10  # older structures have no segment/bus/devfn

# type 9 field offsets
SLOT_DESIGNATION = 0x04
SLOT_TYPE = 0x05
SLOT_SEGMENT = 0x0D
SLOT_BUS = 0x0F
SLOT_DEVFN = 0x10

PCI_SLOT_TYPES = frozenset(
    (0x06, 0x0E, 0x12, 0x1F, 0x20, 0x21, 0x22, 0x23, *range(0xA5, 0xB7))
)

Span = Optional[Tuple[int, int]]


@dataclass(frozen=True)
class StructureRecord:
    """
    One structure: a formatted area of `length` bytes followed by its
    string set. Strings are kept as (start, end) spans into `data`; slot
    N (1-based) is `strings[N - 1]`. A span of None is a slot the string
    set consumed without text (a leading NUL).
    """

    data: Buffer
    offset: int
    record_type: int
    length: int
    handle: int
    strings: Tuple[Span, ...]
    end: int

    @property
    def formatted(self) -> memoryview:
        return memoryview(self.data)[self.offset : self.offset + self.length]

    # Field reads are bounded by the record, not the formatted area: a
    # 0x10-byte type 9 keeps its devfn in the first string-set byte.
    def u8(self, field: int) -> int:
        return read_u8_at(self.data, self.offset + field, self.end)

    def u16(self, field: int) -> int:
        return read_u16le_at(self.data, self.offset + field, self.end)

    def string(self, index: int) -> Optional[str]:
        if index <= 0 or index > len(self.strings):
            return None
        span = self.strings[index - 1]
        if span is None:
            return None
        start, end = span
        return bytes(self.data[start:end]).decode("utf-8", errors="replace")


def _string_set(
    data: Buffer, pos: int, end: int, handle: int
) -> Tuple[Tuple[Span, ...], int]:
    """Return (spans, offset just past the closing NUL)."""
    spans: List[Span] = []
    while True:
        if pos >= end:
            raise StringTableOverflow(
                "string table overflow", offset=pos, handle=handle
            )
        if data[pos] == 0:
            pos += 1
            if spans:
                break
            # leading NUL: the set is empty unless text follows
            spans.append(None)
            continue
        if len(spans) >= MAX_STRINGS:
            raise StringTableOverflow(
                f"more than {MAX_STRINGS} strings", offset=pos, handle=handle
            )
        nul = bytes(data[pos:end]).find(b"\x00")
        if nul < 0:
            raise StringTableOverflow(
                "unterminated string", offset=pos, handle=handle
            )
        spans.append((pos, pos + nul))
        pos += nul + 1
    return tuple(spans), pos


class StructureTableWalker:
    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logging.getLogger(__name__)

    def records(self, data: Buffer, declared_len: int) -> Iterator[StructureRecord]:
        end = min(len(data), declared_len)
        pos = 0
        while end - pos >= HEADER_SIZE:
            rtype = read_u8_at(data, pos, end)
            rlen = read_u8_at(data, pos + 1, end)
            handle = read_u16le_at(data, pos + 2, end)
            if rlen < HEADER_SIZE:
                raise MalformedRecord(
                    f"entry too short ({rlen:#x})", offset=pos, handle=handle
                )
            self.log.debug(
                "Got table type=%d , handle=0x%04x, len=%d", rtype, handle, rlen
            )

            fmt_end = pos + rlen
            if fmt_end > end:
                raise RecordOverflow("entry overflow", offset=pos, handle=handle)

            spans, next_pos = _string_set(data, fmt_end, end, handle)
            yield StructureRecord(
                data=data,
                offset=pos,
                record_type=rtype,
                length=rlen,
                handle=handle,
                strings=spans,
                end=next_pos,
            )
            pos = next_pos

    def _slot(self, rec: StructureRecord) -> Optional[SlotMatch]:
        if rec.length < SLOT_MIN_LEN_BDF:
            self.log.debug(
                "Slot at handle 0x%04x predates BDF fields (len=%d), skipped",
                rec.handle,
                rec.length,
            )
            return None
        name = rec.string(rec.u8(SLOT_DESIGNATION)) or ""
        slot_type = rec.u8(SLOT_TYPE)
        if slot_type not in PCI_SLOT_TYPES:
            self.log.debug(
                "Slot 0x%x found at %04x : %s", slot_type, rec.offset, name
            )
            return None
        bdf = PciAddress.from_devfn(
            rec.u16(SLOT_SEGMENT), rec.u8(SLOT_BUS), rec.u8(SLOT_DEVFN)
        )
        self.log.debug("PCI slot '%s' found! S.BDF = %s", name, bdf.slot_format())
        return SlotMatch(bdf, name)

    def matches(
        self, data: Buffer, declared_len: int, query: SlotQuery
    ) -> Iterator[SlotMatch]:
        for rec in self.records(data, declared_len):
            if rec.record_type != SYSTEM_SLOT_TYPE:
                continue
            slot = self._slot(rec)
            if slot is None:
                continue
            if isinstance(query, MatchExact):
                if slot.address == query.address:
                    self.log.debug(
                        "Matched %s at handle 0x%04x", query.address, rec.handle
                    )
                    yield slot
                    return
                continue
            yield slot

    def scan(
        self, data: Buffer, declared_len: int, query: SlotQuery
    ) -> Optional[str]:
        """
        Name of the first slot matching `query`, "" for a matching slot
        that carries no name, or None when nothing matches.
        """
        for slot in self.matches(data, declared_len, query):
            return slot.name
        return None

    def scan_all(self, data: Buffer, declared_len: int) -> List[SlotMatch]:
        # list() runs the whole walk first: a corrupt tail discards everything
        return list(self.matches(data, declared_len, MatchAll()))


def iter_records(data: Buffer, declared_len: int) -> Iterator[StructureRecord]:
    return StructureTableWalker().records(data, declared_len)


def scan(data: Buffer, declared_len: int, query: SlotQuery) -> Optional[str]:
    return StructureTableWalker().scan(data, declared_len, query)


def scan_all(data: Buffer, declared_len: int) -> List[SlotMatch]:
    return StructureTableWalker().scan_all(data, declared_len)


__all__ = [
    "StructureRecord",
    "StructureTableWalker",
    "PCI_SLOT_TYPES",
    "iter_records",
    "scan",
    "scan_all",
]
