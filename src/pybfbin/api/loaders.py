"""
High-level API functions for loading Byfl binary table streams.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Container
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import polars as pl
import pyarrow as pa

from ..config import DEFAULT_CONFIG, PyBfbinConfig
from ..constants import ColumnType, TableType
from ..core import BfbinHandler, ParseSession
from ..util import get_hash

__all__ = [
    "CollectedTable",
    "TableCollector",
    "read_bfbin",
    "read_bfbin_frames",
    "unique_name",
]

logger = logging.getLogger(__name__)

_ARROW_TYPES = {
    ColumnType.UINT64: pa.uint64(),
    ColumnType.STRING: pa.string(),
    ColumnType.BOOL: pa.bool_(),
}


def unique_name(name: str, taken: Container[str]) -> str:
    """Return ``name``, or ``name_2``, ``name_3``, ... if it is already taken."""
    candidate = name
    suffix = 2
    while candidate in taken:
        candidate = f"{name}_{suffix}"
        suffix += 1
    return candidate


@dataclass
class CollectedTable:
    """Columns and values gathered for one decoded table."""

    name: str
    kind: TableType
    column_names: list[str] = field(default_factory=list)
    column_types: list[ColumnType] = field(default_factory=list)
    values: list[list[Any]] = field(default_factory=list)
    num_rows: int = 0

    def add_column(self, name: str, column_type: ColumnType) -> None:
        self.column_names.append(name)
        self.column_types.append(column_type)
        self.values.append([])

    def to_arrow(self) -> pa.Table:
        """Build a PyArrow table, one typed column per declared column.

        Repeated column names get a ``"_2"``, ``"_3"``, ... suffix.
        """
        arrays = []
        for column_type, values in zip(self.column_types, self.values):
            if column_type == ColumnType.UINT64:
                # Keep the full unsigned range; plain lists of ints would
                # be inferred as int64.
                arrays.append(
                    pa.array(
                        np.fromiter(values, dtype=np.uint64, count=len(values)),
                        type=pa.uint64(),
                    )
                )
            else:
                arrays.append(pa.array(values, type=_ARROW_TYPES[column_type]))
        if not arrays:
            return pa.table({})
        names: list[str] = []
        seen: set[str] = set()
        for name in self.column_names:
            name = unique_name(name, seen)
            seen.add(name)
            names.append(name)
        return pa.Table.from_arrays(arrays, names=names)


class TableCollector(BfbinHandler):
    """Handler set that gathers every table of a stream in memory.

    Basic tables keep one value list per declared column. Key-value
    tables become a single row whose columns are the keys in wire order.

    Example:
        >>> collector = TableCollector()
        >>> decode("run.byfl", collector, HANDLER_SET_SIZE)
        True
        >>> [t.name for t in collector.tables]
        ['Program', 'Functions']
    """

    def __init__(self) -> None:
        self.tables: list[CollectedTable] = []
        self._current: CollectedTable | None = None
        self._column_index = 0

    # --- Tables ---
    def on_table_basic(self, ctx: Any, name: str) -> None:
        self._current = CollectedTable(name, TableType.BASIC)

    def on_table_keyval(self, ctx: Any, name: str) -> None:
        self._current = CollectedTable(name, TableType.KEYVAL, num_rows=1)

    def on_table_end(self, ctx: Any) -> None:
        if self._current is not None:
            self.tables.append(self._current)
        self._current = None

    # --- Columns ---
    def on_column_uint64(self, ctx: Any, name: str) -> None:
        self._current.add_column(name, ColumnType.UINT64)  # type: ignore[union-attr]

    def on_column_string(self, ctx: Any, name: str) -> None:
        self._current.add_column(name, ColumnType.STRING)  # type: ignore[union-attr]

    def on_column_bool(self, ctx: Any, name: str) -> None:
        self._current.add_column(name, ColumnType.BOOL)  # type: ignore[union-attr]

    # --- Rows ---
    def on_row_begin(self, ctx: Any) -> None:
        self._column_index = 0

    def on_row_end(self, ctx: Any) -> None:
        self._current.num_rows += 1  # type: ignore[union-attr]

    def _add_value(self, value: Any) -> None:
        table = self._current
        if table.kind == TableType.KEYVAL:  # type: ignore[union-attr]
            table.values[-1].append(value)  # type: ignore[union-attr]
        else:
            table.values[self._column_index].append(value)  # type: ignore[union-attr]
            self._column_index += 1

    def on_data_uint64(self, ctx: Any, value: int) -> None:
        self._add_value(value)

    def on_data_string(self, ctx: Any, value: str) -> None:
        self._add_value(value)

    def on_data_bool(self, ctx: Any, value: bool) -> None:
        self._add_value(value)


def read_bfbin(
    path: str | Path, *, config: PyBfbinConfig | None = None
) -> dict[str, pa.Table]:
    """
    Read every table of a Byfl binary output file into PyArrow tables.

    Parameters
    ----------
    path : str or Path
        Path to the binary output file.
    config : PyBfbinConfig, optional
        Decoding and loader configuration (default: ``DEFAULT_CONFIG``).

    Returns
    -------
    dict[str, pa.Table]
        Tables keyed by name, in stream order. A repeated table name gets a
        ``"_2"``, ``"_3"``, ... suffix. Each table's schema metadata holds
        ``table_name``, ``table_kind`` (``"basic"`` or ``"keyval"``),
        ``num_rows`` (the decoded row count, which a table without columns
        cannot otherwise carry) and ``file_metadata`` (JSON with the source file name and, when enabled,
        its BLAKE2b hash).

    Raises
    ------
    FileNotFoundError
        If the specified file does not exist
    BfbinError
        The decoding error (a subclass such as ``BfbinTruncatedInputError``)
        if the stream cannot be decoded

    Examples
    --------
    >>> from pybfbin import read_bfbin
    >>> tables = read_bfbin("run.byfl")
    >>> tables["Functions"].num_rows
    12
    >>> tables["Program"].column_names
    ['Bytes loaded', 'Bytes stored', 'Debug build']
    """
    config = config or DEFAULT_CONFIG
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"File not found: {path}")

    collector = TableCollector()
    session = ParseSession(path_obj, collector, None, config.parsing)
    if not session.run():
        logger.error("Failed to decode %s: %s", path_obj, session.error)
        raise session.error  # type: ignore[misc]

    file_metadata: dict[str, Any] = {"source": path_obj.name}
    if config.loader.embed_file_hash:
        file_hash = get_hash(path_obj, config.loader.max_hash_size_mb)
        if file_hash is not None:
            file_metadata["file_hash"] = {"method": "BLAKE2b", "hash": file_hash}
    encoded_file_metadata = json.dumps(file_metadata).encode("utf-8")

    tables: dict[str, pa.Table] = {}
    for collected in collector.tables:
        key = unique_name(collected.name, tables)
        if key != collected.name:
            logger.debug("Renamed duplicate table '%s' to '%s'", collected.name, key)

        table = collected.to_arrow()
        if table.num_columns == 0 and collected.num_rows:
            logger.debug(
                "Table '%s' has %d rows but no columns", collected.name, collected.num_rows
            )
        tables[key] = table.replace_schema_metadata(
            {
                b"table_name": collected.name.encode("utf-8"),
                b"table_kind": collected.kind.name.lower().encode("utf-8"),
                b"num_rows": str(collected.num_rows).encode("utf-8"),
                b"file_metadata": encoded_file_metadata,
            }
        )
    return tables


def read_bfbin_frames(
    path: str | Path, *, config: PyBfbinConfig | None = None
) -> dict[str, pl.DataFrame]:
    """Read every table of a Byfl binary output file into Polars DataFrames.

    See ``read_bfbin`` for naming and error behavior. Schema metadata is
    not carried over to the DataFrames.
    """
    return {
        name: pl.from_arrow(table)  # type: ignore[misc]
        for name, table in read_bfbin(path, config=config).items()
    }
