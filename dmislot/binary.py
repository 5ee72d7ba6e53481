#!/usr/bin/python
#
# Python dmislot library
# Bounded little-endian field readers
#
# (c) 2025 Steven Noonan
# Licensed under the MIT license
#
# Every read names the window it must stay inside; firmware data is
# never trusted to be as long as it claims.
#

import struct
from typing import Optional, Union

from .errors import OutOfBounds

Buffer = Union[bytes, bytearray, memoryview]

U8 = struct.Struct("<B")
U16 = struct.Struct("<H")
U32 = struct.Struct("<I")
U64 = struct.Struct("<Q")


def _read(fmt: struct.Struct, buf: Buffer, offset: int, limit: Optional[int]) -> int:
    end = len(buf) if limit is None else min(limit, len(buf))
    if offset < 0 or offset + fmt.size > end:
        raise OutOfBounds(
            f"{fmt.size}-byte read past end of buffer (len=0x{end:x})", offset=offset
        )
    return fmt.unpack_from(buf, offset)[0]


def read_u8_at(buf: Buffer, offset: int, limit: Optional[int] = None) -> int:
    return _read(U8, buf, offset, limit)


def read_u16le_at(buf: Buffer, offset: int, limit: Optional[int] = None) -> int:
    return _read(U16, buf, offset, limit)


def read_u32le_at(buf: Buffer, offset: int, limit: Optional[int] = None) -> int:
    return _read(U32, buf, offset, limit)


def read_u64le_at(buf: Buffer, offset: int, limit: Optional[int] = None) -> int:
    return _read(U64, buf, offset, limit)
