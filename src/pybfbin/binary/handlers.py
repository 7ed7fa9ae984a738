"""
Column value handlers and registry for typed value decoding.
"""

from __future__ import annotations

import logging
from typing import Any, List, Protocol

from ..config import ParsingConfig
from ..constants import ColumnType
from ..exceptions import BfbinInternalError
from .codec import ScalarCodec

__all__ = [
    "BoolHandler",
    "StringHandler",
    "Uint64Handler",
    "ValueHandler",
    "ValueHandlerRegistry",
]

logger = logging.getLogger(__name__)


class ValueHandler(Protocol):
    """Protocol for column value handlers."""

    column_event: str
    data_event: str

    def can_handle(self, column_type: int) -> bool:
        """Check if this handler decodes values of the given column type."""
        ...

    def read(self, codec: ScalarCodec, config: ParsingConfig) -> Any:
        """Decode one value from the codec."""
        ...


class Uint64Handler:
    """Handler for unsigned 64-bit big-endian integer columns.

    Example:
        >>> handler = Uint64Handler()
        >>> handler.can_handle(ColumnType.UINT64)
        True
        >>> handler.read(codec, config)  # wire bytes 00 00 00 00 00 00 00 2a
        42
    """

    column_event = "on_column_uint64"
    data_event = "on_data_uint64"

    def can_handle(self, column_type: int) -> bool:
        return column_type == ColumnType.UINT64

    def read(self, codec: ScalarCodec, config: ParsingConfig) -> int:
        return codec.read_uint(codec.markers.UINT64_WIDTH)


class StringHandler:
    """Handler for length-prefixed string columns.

    Values are decoded to ``str`` with the configured encoding before they
    leave the scratch buffer.
    """

    column_event = "on_column_string"
    data_event = "on_data_string"

    def can_handle(self, column_type: int) -> bool:
        return column_type == ColumnType.STRING

    def read(self, codec: ScalarCodec, config: ParsingConfig) -> str:
        return codec.read_text(config.string_encoding, config.string_errors)


class BoolHandler:
    """Handler for single-byte boolean columns."""

    column_event = "on_column_bool"
    data_event = "on_data_bool"

    def can_handle(self, column_type: int) -> bool:
        return column_type == ColumnType.BOOL

    def read(self, codec: ScalarCodec, config: ParsingConfig) -> bool:
        return codec.read_bool()


class ValueHandlerRegistry:
    """Registry of column value handlers with pluggable architecture.

    The registry maps a column type tag read from the wire to the handler
    that knows which events it fires and how to decode its values. It uses
    a chain-of-responsibility lookup, checking handlers in registration
    order.

    Example:
        >>> registry = ValueHandlerRegistry()
        >>> registry.lookup(ColumnType.STRING).data_event
        'on_data_string'
        >>> registry.lookup(9)
        Traceback (most recent call last):
        ...
        BfbinInternalError: Unknown column type 9

    Attributes:
        _handlers: List of registered value handlers
    """

    def __init__(self) -> None:
        self._handlers: List[ValueHandler] = []
        self._register_default_handlers()

    def _register_default_handlers(self) -> None:
        """Register default value handlers."""
        self.register(Uint64Handler())
        self.register(StringHandler())
        self.register(BoolHandler())

    def register(self, handler: ValueHandler) -> None:
        """Register a new value handler."""
        self._handlers.append(handler)

    def lookup(self, column_type: int, offset: int | None = None) -> ValueHandler:
        """Return the handler for ``column_type``.

        Raises:
            BfbinInternalError: If no handler decodes this column type
        """
        for handler in self._handlers:
            if handler.can_handle(column_type):
                return handler
        where = f" at position {offset}" if offset is not None else ""
        raise BfbinInternalError(f"Unknown column type {column_type}{where}")
