"""
Event contract between the decoder and caller-supplied handler sets.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

__all__ = ["EVENT_NAMES", "HANDLER_SET_SIZE", "BfbinHandler", "EventDispatcher"]

Callback = Callable[..., Any]

# Order is part of the contract; HANDLER_SET_SIZE is derived from it.
EVENT_NAMES: tuple[str, ...] = (
    "on_table_basic",
    "on_table_keyval",
    "on_table_end",
    "on_column_begin",
    "on_column_uint64",
    "on_column_string",
    "on_column_bool",
    "on_column_end",
    "on_row_begin",
    "on_row_end",
    "on_data_uint64",
    "on_data_string",
    "on_data_bool",
    "on_error",
)

HANDLER_SET_SIZE = len(EVENT_NAMES)


class BfbinHandler:
    """Convenience base class for handler sets.

    Every event starts out absent. Subclasses define only the events they
    care about; each receives the caller context first, followed by the
    event payload:

    - ``on_table_basic(ctx, name)`` / ``on_table_keyval(ctx, name)``
    - ``on_table_end(ctx)``
    - ``on_column_begin(ctx)`` / ``on_column_end(ctx)`` (basic tables only)
    - ``on_column_uint64(ctx, name)``, ``on_column_string(ctx, name)``,
      ``on_column_bool(ctx, name)``
    - ``on_row_begin(ctx)`` / ``on_row_end(ctx)``
    - ``on_data_uint64(ctx, value)``, ``on_data_string(ctx, value)``,
      ``on_data_bool(ctx, value)``
    - ``on_error(ctx, message)``

    Any object exposing some of these attribute names works as a handler
    set; subclassing is optional.

    Example:
        >>> class Counter(BfbinHandler):
        ...     def on_row_end(self, ctx):
        ...         ctx["rows"] += 1
        >>> totals = {"rows": 0}
        >>> decode("run.byfl", Counter(), HANDLER_SET_SIZE, totals)
        True
    """

    on_table_basic: Optional[Callback] = None
    on_table_keyval: Optional[Callback] = None
    on_table_end: Optional[Callback] = None
    on_column_begin: Optional[Callback] = None
    on_column_uint64: Optional[Callback] = None
    on_column_string: Optional[Callback] = None
    on_column_bool: Optional[Callback] = None
    on_column_end: Optional[Callback] = None
    on_row_begin: Optional[Callback] = None
    on_row_end: Optional[Callback] = None
    on_data_uint64: Optional[Callback] = None
    on_data_string: Optional[Callback] = None
    on_data_bool: Optional[Callback] = None
    on_error: Optional[Callback] = None


class EventDispatcher:
    """Resolves a handler set once and invokes the events it provides.

    Absent events (missing attributes, or attributes set to ``None``) are
    skipped. Callbacks run synchronously; exceptions they raise are not
    caught here.
    """

    def __init__(self, handlers: Any, context: Any = None) -> None:
        self.context = context
        self._callbacks: Dict[str, Callback] = {}
        for name in EVENT_NAMES:
            callback = getattr(handlers, name, None)
            if callable(callback):
                self._callbacks[name] = callback

    def get(self, name: str) -> Optional[Callback]:
        return self._callbacks.get(name)

    def has(self, name: str) -> bool:
        return name in self._callbacks

    def invoke(self, name: str, *args: Any) -> None:
        callback = self._callbacks.get(name)
        if callback is not None:
            callback(self.context, *args)
