#!/usr/bin/python
#
# Python dmislot library
# SMBIOS entry point parser
#
# (c) 2025 Steven Noonan
# Licensed under the MIT license
#
# Handles both the 2.x "_SM_" (32-bit) and the 3.x "_SM3_" (64-bit)
# entry point structures. The checksum byte is read but only verified
# on request.
#

from __future__ import annotations
import logging
from typing import Optional

from .binary import Buffer, read_u8_at, read_u16le_at, read_u32le_at, read_u64le_at
from .errors import BadChecksum, BadLength, BadSignature, TooShort, Truncated
from .types import EntryPointFormat, TableDescriptor

ANCHOR_PREFIX = b"_SM"
MIN_READ = 8

EP32_MIN_LEN = 0x1E
EP64_MIN_LEN = 0x18
EP_MAX_LEN = 0x24  # exclusive

# field offsets
EP32_TABLE_LEN = 0x16
EP32_TABLE_ADDR = 0x18
EP64_TABLE_LEN = 0x0C
EP64_TABLE_ADDR = 0x10


class EntryPointParser:
    def __init__(
        self, verify_checksum: bool = False, log: Optional[logging.Logger] = None
    ):
        self.verify_checksum = verify_checksum
        self.log = log or logging.getLogger(__name__)

    def _detect_format(self, data: Buffer) -> EntryPointFormat:
        if bytes(data[0:3]) != ANCHOR_PREFIX:
            raise BadSignature("bad SMBIOS anchor", offset=0)
        if data[3] == ord("_"):
            self.log.debug("Got 32-bit entry point")
            return EntryPointFormat.THIRTY_TWO_BIT
        if data[3] == ord("3") and data[4] == ord("_"):
            self.log.debug("Got 64-bit entry point")
            return EntryPointFormat.SIXTY_FOUR_BIT
        raise BadSignature("bad SMBIOS anchor", offset=3)

    @staticmethod
    def _check_length(fmt: EntryPointFormat, ep_len: int, offset: int) -> None:
        if fmt is EntryPointFormat.SIXTY_FOUR_BIT and ep_len < EP64_MIN_LEN:
            raise BadLength(
                f"entry point is too small for 64-bit: {ep_len:#x}", offset=offset
            )
        if fmt is EntryPointFormat.THIRTY_TWO_BIT and ep_len < EP32_MIN_LEN:
            raise BadLength(
                f"entry point is too small for 32-bit: {ep_len:#x}", offset=offset
            )
        if ep_len >= EP_MAX_LEN:
            raise BadLength(f"entry point too large: {ep_len:#x}", offset=offset)

    def parse(self, data: Buffer) -> TableDescriptor:
        if len(data) < MIN_READ:
            raise TooShort(f"entry point too short: {len(data)} bytes")

        fmt = self._detect_format(data)
        is64 = fmt is EntryPointFormat.SIXTY_FOUR_BIT

        # anchor, then checksum, then length
        p = 5 if is64 else 4
        checksum = read_u8_at(data, p)
        p += 1
        ep_len = read_u8_at(data, p)
        self._check_length(fmt, ep_len, p)
        p += 1

        if len(data) < ep_len:
            raise Truncated(
                f"cannot read remaining entry point: have {len(data)} of {ep_len} bytes"
            )
        self.log.debug("ep pos = %d, len=%d", p, ep_len)

        if self.verify_checksum:
            total = sum(bytes(data[:ep_len])) & 0xFF
            if total != 0:
                raise BadChecksum(
                    f"entry point checksum mismatch (sum={total:#04x})", offset=p - 2
                )

        major = read_u8_at(data, p, ep_len)
        minor = read_u8_at(data, p + 1, ep_len)
        docrev = read_u8_at(data, p + 2, ep_len) if is64 else 0

        if is64:
            table_len = read_u32le_at(data, EP64_TABLE_LEN, ep_len)
            table_addr = read_u64le_at(data, EP64_TABLE_ADDR, ep_len)
        else:
            table_len = read_u16le_at(data, EP32_TABLE_LEN, ep_len)
            table_addr = read_u32le_at(data, EP32_TABLE_ADDR, ep_len)

        self.log.debug("Got entry point, len=%d, addr=0x%x", table_len, table_addr)
        return TableDescriptor(
            version=(major, minor, docrev),
            table_len=table_len,
            table_addr=table_addr,
            format=fmt,
            entry_len=ep_len,
            checksum=checksum,
        )


def parse_entry_point(data: Buffer, verify_checksum: bool = False) -> TableDescriptor:
    return EntryPointParser(verify_checksum=verify_checksum).parse(data)


__all__ = ["EntryPointParser", "parse_entry_point"]
