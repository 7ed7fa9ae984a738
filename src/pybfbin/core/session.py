"""
Parsing sessions and the public decode entry point.
"""

from __future__ import annotations

import logging
from typing import Any

from ..binary import ByteSource, ScalarCodec, ScratchBuffer
from ..binary.source import Resource
from ..config import DEFAULT_CONFIG, ParsingConfig
from ..constants import BinaryMarkers
from ..exceptions import (
    BfbinError,
    BfbinHandlerSetMismatchError,
    BfbinMalformedHeaderError,
    BfbinTruncatedInputError,
)
from .events import HANDLER_SET_SIZE, EventDispatcher
from .walker import GrammarWalker

__all__ = ["ParseSession", "decode"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class ParseSession:
    """Owns the transient state of one decode: source, scratch buffer, error.

    A session is the single place where decoding errors are handled. Any
    ``BfbinError`` raised by the byte source, the codec or the walker
    unwinds to ``run``, which releases the scratch buffer, closes the
    source and then notifies the handler set's ``on_error`` exactly once.
    Exceptions raised by handler callbacks are not decoding errors: the
    session still cleans up, then lets them propagate.

    Sessions are single-use and hold no shared state, so separate sessions
    may run on separate threads.

    Example:
        >>> session = ParseSession("run.byfl", handlers, context)
        >>> session.run()
        False
        >>> session.error
        BfbinMalformedHeaderError('File run.byfl does not appear to be a Byfl binary-output file')

    Attributes:
        source: Byte source over the input resource
        scratch: Reusable decode buffer
        walker: Grammar walker driving the handler set
        error: The error that ended the session, if any
    """

    def __init__(
        self,
        resource: Resource,
        handlers: Any,
        context: Any = None,
        config: ParsingConfig | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG.parsing
        self.markers = BinaryMarkers()
        self.dispatcher = EventDispatcher(handlers, context)
        self.source = ByteSource(resource, self.config.read_buffer_size)
        self.scratch = ScratchBuffer(self.markers.UINT64_WIDTH)
        self.codec = ScalarCodec(self.source, self.scratch, self.markers)
        self.walker = GrammarWalker(self.codec, self.dispatcher, self.config)
        self.error: BfbinError | None = None

    def run(self) -> bool:
        """Decode the whole resource.

        Returns:
            True if the stream terminator was reached, False if an error was
            reported through ``on_error``
        """
        try:
            self._decode()
        except BfbinError as e:
            self.error = e
        except BaseException:
            self._release(quiet=True)
            raise

        self._release(quiet=self.error is not None)
        if self.error is None:
            return True

        logger.debug("Decoding %s failed: %s", self.source.name, self.error)
        self.dispatcher.invoke("on_error", str(self.error))
        return False

    def _decode(self) -> None:
        self.source.open()
        self._check_header()
        while self.walker.walk_table():
            pass
        stats = self.walker.stats
        logger.debug(
            "Finished %s: %d tables, %d rows, %d values",
            self.source.name,
            stats.tables,
            stats.rows,
            stats.values,
        )

    def _check_header(self) -> None:
        magic = self.markers.MAGIC
        view = self.scratch.view(len(magic))
        try:
            self.source.readinto_exact(view, "the file header")
        except BfbinTruncatedInputError as e:
            raise BfbinMalformedHeaderError(
                f"Failed to read the file header from {self.source.name} ({e.reason})"
            ) from e
        if view != magic:
            raise BfbinMalformedHeaderError(
                f"File {self.source.name} does not appear to be a Byfl binary-output file"
            )

    def _release(self, quiet: bool) -> None:
        self.scratch.release()
        try:
            self.source.close()
        except BfbinError as e:
            if not quiet:
                self.error = e
            else:
                logger.warning("Error while closing %s: %s", self.source.name, e)


def decode(
    resource: Resource,
    handlers: Any,
    handlers_size: int,
    context: Any = None,
    config: ParsingConfig | None = None,
) -> bool:
    """Decode a Byfl binary table stream, firing events on ``handlers``.

    This is the sole entry point of the decoder. It is synchronous and
    returns once the whole resource has been consumed or an error has been
    reported.

    Args:
        resource: Path to the input file, or an open binary file object
        handlers: Handler set; see ``BfbinHandler`` for the event names
        handlers_size: Event-contract revision the handler set was built
            for; callers pass ``HANDLER_SET_SIZE``
        context: Opaque value passed as the first argument to every event
        config: Parsing configuration (default: ``DEFAULT_CONFIG.parsing``)

    Returns:
        True on success. False if decoding failed or the handler set does
        not match this decoder; the reason goes to ``on_error`` when the
        handler set provides it.

    Examples:
        >>> class Tables(BfbinHandler):
        ...     def on_table_basic(self, ctx, name):
        ...         ctx.append(name)
        >>> names = []
        >>> decode("run.byfl", Tables(), HANDLER_SET_SIZE, names)
        True
        >>> names
        ['Functions', 'Call stacks']
    """
    if handlers_size != HANDLER_SET_SIZE:
        error = BfbinHandlerSetMismatchError(
            "Mismatched handler set and decoder "
            f"(expected {HANDLER_SET_SIZE} events, got {handlers_size})"
        )
        logger.debug("%s", error)
        on_error = getattr(handlers, "on_error", None)
        if callable(on_error):
            on_error(context, str(error))
        return False

    return ParseSession(resource, handlers, context, config).run()
