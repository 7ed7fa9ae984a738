"""
Wire constants for the Byfl binary table stream format.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = ["BinaryMarkers", "ColumnType", "RowType", "TableType"]


class TableType(IntEnum):
    """Table-level tag preceding every table (and ending the stream)."""

    NONE = 0
    BASIC = 1
    KEYVAL = 2


class ColumnType(IntEnum):
    """Column/key type tags; NONE terminates column and key-value lists."""

    NONE = 0
    UINT64 = 1
    STRING = 2
    BOOL = 3


class RowType(IntEnum):
    """Row marker; NONE terminates a basic table's rows."""

    NONE = 0
    DATA = 1


@dataclass(frozen=True)
class BinaryMarkers:
    """Fixed byte sequences and field widths of the stream.

    Every structural tag (table, column and row types) is a single unsigned
    byte. String lengths are unsigned 16-bit big-endian integers.
    """

    MAGIC: bytes = b"BYFLBIN"
    TAG_WIDTH: int = 1
    STRING_LENGTH_WIDTH: int = 2
    UINT64_WIDTH: int = 8
    BOOL_WIDTH: int = 1
