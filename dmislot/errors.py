# dmislot/errors.py
from __future__ import annotations
from typing import Optional


class DecodeError(ValueError):
    """Base class for every structural problem found in firmware data."""

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        handle: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.handle = handle

    def __str__(self) -> str:
        msg = super().__str__()
        where = []
        if self.offset is not None:
            where.append(f"offset=0x{self.offset:x}")
        if self.handle is not None:
            where.append(f"handle=0x{self.handle:04x}")
        if where:
            return f"{msg} ({', '.join(where)})"
        return msg


class OutOfBounds(DecodeError):
    pass


# ----- entry point -----
class EntryPointError(DecodeError):
    pass


class TooShort(EntryPointError):
    pass


class BadSignature(EntryPointError):
    pass


class BadLength(EntryPointError):
    pass


class Truncated(EntryPointError):
    pass


class BadChecksum(EntryPointError):
    pass


# ----- structure table -----
class TableError(DecodeError):
    pass


class MalformedRecord(TableError):
    pass


class RecordOverflow(TableError):
    pass


class StringTableOverflow(TableError):
    pass


class SourceError(OSError):
    """The firmware blobs could not be read from disk."""


__all__ = [
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
]
