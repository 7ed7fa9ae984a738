"""
Recursive-descent walker over tables, column headers and rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..binary import ScalarCodec, ValueHandler, ValueHandlerRegistry
from ..config import ParsingConfig
from ..constants import ColumnType, RowType, TableType
from ..exceptions import BfbinInternalError
from .events import EventDispatcher

__all__ = ["GrammarWalker", "WalkStats"]

logger = logging.getLogger(__name__)

Column = Tuple[ValueHandler, Optional[Callable[..., Any]]]


@dataclass
class WalkStats:
    """Running totals of what a walker has decoded."""

    tables: int = 0
    rows: int = 0
    values: int = 0


class GrammarWalker:
    """Decodes one table at a time and fires events in grammar order.

    Stream grammar (all tags are single bytes)::

        stream   := MAGIC table* TABLE_NONE
        table    := TABLE_BASIC name columns rows
                  | TABLE_KEYVAL name entries
        columns  := (col_type name)* COL_NONE
        rows     := (ROW_DATA value{ncols})* ROW_NONE
        entries  := (col_type name value)* COL_NONE

    The column list of a basic table lives only for the duration of
    ``walk_table``. Unknown tags at any level raise ``BfbinInternalError``.

    Example:
        >>> walker = GrammarWalker(codec, EventDispatcher(handlers, ctx))
        >>> while walker.walk_table():
        ...     pass
        >>> walker.stats.tables
        3
    """

    def __init__(
        self,
        codec: ScalarCodec,
        dispatcher: EventDispatcher,
        config: ParsingConfig | None = None,
        registry: ValueHandlerRegistry | None = None,
    ) -> None:
        self.codec = codec
        self.dispatcher = dispatcher
        self.config = config or ParsingConfig()
        self.registry = registry or ValueHandlerRegistry()
        self.stats = WalkStats()

    def _read_name(self) -> str:
        return self.codec.read_text(
            self.config.string_encoding, self.config.string_errors
        )

    def walk_table(self) -> bool:
        """Decode one complete table.

        Returns:
            False once the stream terminator is read, True otherwise
        """
        offset = self.codec.source.tell()
        table_type = self.codec.read_tag()
        if table_type == TableType.NONE:
            return False
        if table_type not in (TableType.BASIC, TableType.KEYVAL):
            raise BfbinInternalError(
                f"Unknown table type {table_type} at position {offset}"
            )

        name = self._read_name()
        rows_before = self.stats.rows
        if table_type == TableType.BASIC:
            self.dispatcher.invoke("on_table_basic", name)
            self._walk_basic_table()
        else:
            self.dispatcher.invoke("on_table_keyval", name)
            self._walk_key_value_table()
        self.dispatcher.invoke("on_table_end")

        self.stats.tables += 1
        logger.debug(
            "Decoded %s table '%s' (%d rows)",
            TableType(table_type).name.lower(),
            name,
            self.stats.rows - rows_before,
        )
        return True

    def _walk_basic_table(self) -> None:
        codec = self.codec
        dispatcher = self.dispatcher
        config = self.config

        # Column header
        dispatcher.invoke("on_column_begin")
        columns: List[Column] = []
        while True:
            offset = codec.source.tell()
            column_type = codec.read_tag()
            if column_type == ColumnType.NONE:
                break
            handler = self.registry.lookup(column_type, offset)
            name = self._read_name()
            columns.append((handler, dispatcher.get(handler.data_event)))
            dispatcher.invoke(handler.column_event, name)
        dispatcher.invoke("on_column_end")

        # Rows
        context = dispatcher.context
        row_begin = dispatcher.get("on_row_begin")
        row_end = dispatcher.get("on_row_end")
        while True:
            offset = codec.source.tell()
            row_type = codec.read_tag()
            if row_type == RowType.NONE:
                break
            if row_type != RowType.DATA:
                raise BfbinInternalError(
                    f"Unknown row type {row_type} at position {offset}"
                )

            if row_begin is not None:
                row_begin(context)
            for handler, callback in columns:
                value = handler.read(codec, config)
                if callback is not None:
                    callback(context, value)
            if row_end is not None:
                row_end(context)

            self.stats.rows += 1
            self.stats.values += len(columns)

    def _walk_key_value_table(self) -> None:
        codec = self.codec
        dispatcher = self.dispatcher
        while True:
            offset = codec.source.tell()
            key_type = codec.read_tag()
            if key_type == ColumnType.NONE:
                break
            handler = self.registry.lookup(key_type, offset)
            name = self._read_name()
            dispatcher.invoke(handler.column_event, name)
            value = handler.read(codec, self.config)
            dispatcher.invoke(handler.data_event, value)
            self.stats.values += 1
