"""
Buffered, forward-only byte source over a named input.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO

from ..config import DEFAULT_READ_BUFFER_SIZE
from ..exceptions import BfbinIOError, BfbinTruncatedInputError

__all__ = ["ByteSource", "Resource"]

logger = logging.getLogger(__name__)

Resource = str | os.PathLike[str] | BinaryIO


class ByteSource:
    """Sequential reader that returns exactly the requested number of bytes.

    A source is built from either a filesystem path, which it opens and
    closes itself, or an already-open binary file object, which it reads
    but never closes. Paths are opened with a large read buffer; if that
    buffer cannot be allocated the source falls back to unbuffered reads.

    Example:
        >>> with ByteSource("run.byfl") as source:
        ...     magic = source.read_exact(7)
        >>> magic
        b'BYFLBIN'

    Attributes:
        name: Printable name of the resource, used in error messages
        buffer_size: Requested read buffer size in bytes
    """

    def __init__(
        self, resource: Resource, buffer_size: int = DEFAULT_READ_BUFFER_SIZE
    ) -> None:
        self.buffer_size = buffer_size
        self._resource = resource
        self._stream: BinaryIO | None = None
        self._owned = False
        self._position = 0
        if hasattr(resource, "read"):
            self.name = str(getattr(resource, "name", "<stream>"))
        else:
            self.name = os.fspath(resource)  # type: ignore[arg-type]

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> "ByteSource":
        """Open the resource for reading.

        Raises:
            BfbinIOError: If the resource cannot be opened
        """
        if self._stream is not None:
            return self

        if hasattr(self._resource, "read"):
            self._stream = self._resource  # type: ignore[assignment]
            self._owned = False
            try:
                self._position = self._stream.tell()  # type: ignore[union-attr]
            except (OSError, AttributeError, ValueError):
                self._position = 0
            return self

        try:
            try:
                self._stream = open(self.name, "rb", buffering=self.buffer_size)
            except (MemoryError, OverflowError, ValueError) as e:
                # Buffering is an optimization only.
                logger.debug(
                    "Could not allocate a %d-byte read buffer for %s (%s); "
                    "reading unbuffered",
                    self.buffer_size,
                    self.name,
                    e,
                )
                self._stream = open(self.name, "rb", buffering=0)
        except OSError as e:
            raise BfbinIOError(
                f"Failed to open {self.name} ({e.strerror or e})"
            ) from e

        self._owned = True
        self._position = 0
        logger.debug("Opened %s for reading", self.name)
        return self

    def tell(self) -> int:
        """Return the number of bytes consumed so far."""
        return self._position

    def readinto_exact(self, view: memoryview, what: str | None = None) -> None:
        """Fill ``view`` completely from the source.

        Args:
            view: Writable buffer to fill
            what: Description of the value being read, for error messages

        Raises:
            BfbinTruncatedInputError: If the source runs dry or a read fails
        """
        if self._stream is None:
            raise BfbinIOError(f"{self.name} is not open")

        wanted = len(view)
        offset = self._position
        filled = 0
        reason = "unexpected end of file"
        readinto = getattr(self._stream, "readinto", None)
        try:
            while filled < wanted:
                if readinto is not None:
                    got = readinto(view[filled:])
                else:
                    # Streams that only provide read()
                    chunk = self._stream.read(wanted - filled)
                    got = len(chunk) if chunk else 0
                    if got:
                        view[filled : filled + got] = chunk
                if not got:
                    break
                filled += got
        except OSError as e:
            reason = e.strerror or str(e)
        self._position += filled

        if filled < wanted:
            what = what or f"{wanted} bytes"
            raise BfbinTruncatedInputError(
                f"Failed to read {what} from {self.name} at position {offset} ({reason})",
                offset=offset,
                reason=reason,
            )

    def read_exact(self, n: int, what: str | None = None) -> bytes:
        """Read and return exactly ``n`` bytes."""
        data = bytearray(n)
        self.readinto_exact(memoryview(data), what)
        return bytes(data)

    def close(self) -> None:
        """Close the resource if this source opened it.

        Raises:
            BfbinIOError: If closing the underlying file fails
        """
        stream, self._stream = self._stream, None
        if stream is None or not self._owned:
            return
        try:
            stream.close()
        except OSError as e:
            raise BfbinIOError(f"Failed to close {self.name} ({e.strerror or e})") from e
        logger.debug("Closed %s after %d bytes", self.name, self._position)

    def __enter__(self) -> "ByteSource":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
