"""
Shared fixtures and a reference stream encoder for pybfbin tests.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Any, Callable

import pytest

from pybfbin.constants import BinaryMarkers, ColumnType, RowType, TableType
from pybfbin.core import BfbinHandler


def encode_string(value: str | bytes) -> bytes:
    data = value.encode("utf-8") if isinstance(value, str) else value
    return struct.pack(">H", len(data)) + data


def encode_value(column_type: ColumnType, value: Any) -> bytes:
    if column_type == ColumnType.UINT64:
        return struct.pack(">Q", value)
    if column_type == ColumnType.STRING:
        return encode_string(value)
    if column_type == ColumnType.BOOL:
        return bytes([int(value)])
    raise ValueError(f"Cannot encode column type {column_type}")


class StreamBuilder:
    """Test-only writer for binary table streams.

    Example:
        >>> data = (
        ...     StreamBuilder()
        ...     .basic_table("Tally", [(ColumnType.UINT64, "Count")], [[42]])
        ...     .build()
        ... )
    """

    def __init__(self, magic: bytes = BinaryMarkers.MAGIC) -> None:
        self._parts: list[bytes] = [magic]

    def raw(self, data: bytes) -> "StreamBuilder":
        self._parts.append(data)
        return self

    def basic_table(
        self,
        name: str,
        columns: list[tuple[ColumnType, str]],
        rows: list[list[Any]],
    ) -> "StreamBuilder":
        self._parts.append(bytes([TableType.BASIC]) + encode_string(name))
        for column_type, column_name in columns:
            self._parts.append(bytes([column_type]) + encode_string(column_name))
        self._parts.append(bytes([ColumnType.NONE]))
        for row in rows:
            self._parts.append(bytes([RowType.DATA]))
            for (column_type, _), value in zip(columns, row):
                self._parts.append(encode_value(column_type, value))
        self._parts.append(bytes([RowType.NONE]))
        return self

    def keyval_table(
        self, name: str, entries: list[tuple[ColumnType, str, Any]]
    ) -> "StreamBuilder":
        self._parts.append(bytes([TableType.KEYVAL]) + encode_string(name))
        for column_type, key, value in entries:
            self._parts.append(
                bytes([column_type]) + encode_string(key) + encode_value(column_type, value)
            )
        self._parts.append(bytes([ColumnType.NONE]))
        return self

    def build(self, terminate: bool = True) -> bytes:
        parts = list(self._parts)
        if terminate:
            parts.append(bytes([TableType.NONE]))
        return b"".join(parts)


_TYPE_NAMES = {
    ColumnType.UINT64: "uint64",
    ColumnType.STRING: "string",
    ColumnType.BOOL: "bool",
}


def expected_events(tables: list[tuple]) -> list[tuple]:
    """Events a decoder must fire for tables described as StreamBuilder input.

    Each table is ``("basic", name, columns, rows)`` or
    ``("keyval", name, entries)``.
    """
    events: list[tuple] = []
    for table in tables:
        if table[0] == "basic":
            _, name, columns, rows = table
            events.append(("table_basic", name))
            events.append(("column_begin",))
            for column_type, column_name in columns:
                events.append((f"column_{_TYPE_NAMES[column_type]}", column_name))
            events.append(("column_end",))
            for row in rows:
                events.append(("row_begin",))
                for (column_type, _), value in zip(columns, row):
                    events.append((f"data_{_TYPE_NAMES[column_type]}", value))
                events.append(("row_end",))
        else:
            _, name, entries = table
            events.append(("table_keyval", name))
            for column_type, key, value in entries:
                events.append((f"column_{_TYPE_NAMES[column_type]}", key))
                events.append((f"data_{_TYPE_NAMES[column_type]}", value))
        events.append(("table_end",))
    return events


def build_stream(tables: list[tuple]) -> bytes:
    builder = StreamBuilder()
    for table in tables:
        if table[0] == "basic":
            builder.basic_table(table[1], table[2], table[3])
        else:
            builder.keyval_table(table[1], table[2])
    return builder.build()


class RecordingHandler(BfbinHandler):
    """Handler set that appends every event to the caller context (a list)."""

    def on_table_basic(self, ctx: list, name: str) -> None:
        ctx.append(("table_basic", name))

    def on_table_keyval(self, ctx: list, name: str) -> None:
        ctx.append(("table_keyval", name))

    def on_table_end(self, ctx: list) -> None:
        ctx.append(("table_end",))

    def on_column_begin(self, ctx: list) -> None:
        ctx.append(("column_begin",))

    def on_column_uint64(self, ctx: list, name: str) -> None:
        ctx.append(("column_uint64", name))

    def on_column_string(self, ctx: list, name: str) -> None:
        ctx.append(("column_string", name))

    def on_column_bool(self, ctx: list, name: str) -> None:
        ctx.append(("column_bool", name))

    def on_column_end(self, ctx: list) -> None:
        ctx.append(("column_end",))

    def on_row_begin(self, ctx: list) -> None:
        ctx.append(("row_begin",))

    def on_row_end(self, ctx: list) -> None:
        ctx.append(("row_end",))

    def on_data_uint64(self, ctx: list, value: int) -> None:
        ctx.append(("data_uint64", value))

    def on_data_string(self, ctx: list, value: str) -> None:
        ctx.append(("data_string", value))

    def on_data_bool(self, ctx: list, value: bool) -> None:
        ctx.append(("data_bool", value))

    def on_error(self, ctx: list, message: str) -> None:
        ctx.append(("error", message))


TALLY_TABLES = [("basic", "Tally", [(ColumnType.UINT64, "Count")], [[42]])]

CFG_TABLES = [
    (
        "keyval",
        "Cfg",
        [(ColumnType.STRING, "Version", "1.0"), (ColumnType.BOOL, "Debug", True)],
    )
]


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def write_stream(tmp_path: Path) -> Callable[[bytes], Path]:
    """Factory fixture writing stream bytes to a temporary file."""
    counter = iter(range(1_000_000))

    def _write(data: bytes, suffix: str = ".byfl") -> Path:
        path = tmp_path / f"stream_{next(counter)}{suffix}"
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def tally_file(write_stream: Callable[[bytes], Path]) -> Path:
    return write_stream(build_stream(TALLY_TABLES))


@pytest.fixture
def mixed_file(write_stream: Callable[[bytes], Path]) -> Path:
    """A keyval table, a basic table with all column types, and an empty table."""
    data = (
        StreamBuilder()
        .keyval_table(
            "Program",
            [
                (ColumnType.STRING, "Name", "a.out"),
                (ColumnType.UINT64, "Bytes loaded", 2**64 - 1),
                (ColumnType.BOOL, "Debug build", False),
            ],
        )
        .basic_table(
            "Functions",
            [
                (ColumnType.STRING, "Function"),
                (ColumnType.UINT64, "Calls"),
                (ColumnType.BOOL, "Leaf"),
            ],
            [["main", 1, False], ["helper", 7, True], ["", 0, True]],
        )
        .basic_table("Empty", [], [])
        .build()
    )
    return write_stream(data)
