"""
Big-endian scalar and length-prefixed string decoding.
"""

from __future__ import annotations

import logging
import struct

from ..constants import BinaryMarkers
from ..exceptions import BfbinInternalError
from .buffer import ScratchBuffer
from .source import ByteSource

__all__ = ["ScalarCodec"]

logger = logging.getLogger(__name__)

# Big-endian unsigned formats keyed by width in bytes.
_UINT_FORMATS = {1: ">B", 2: ">H", 4: ">I", 8: ">Q"}


class ScalarCodec:
    """Decodes fixed-width integers, booleans and strings from a byte source.

    All reads go through a single scratch buffer owned by the parsing
    session, so decoding a string never allocates once the buffer is large
    enough. Memoryviews returned by ``read_string`` are only valid until the
    next read.

    Example:
        >>> codec = ScalarCodec(source, ScratchBuffer())
        >>> codec.read_uint(2)
        7
        >>> bytes(codec.read_string())
        b'Count'
    """

    def __init__(
        self,
        source: ByteSource,
        scratch: ScratchBuffer,
        markers: BinaryMarkers | None = None,
    ) -> None:
        self.source = source
        self.scratch = scratch
        self.markers = markers or BinaryMarkers()

    def read_uint(self, width: int) -> int:
        """Read a ``width``-byte big-endian unsigned integer."""
        fmt = _UINT_FORMATS.get(width)
        if fmt is None:
            raise BfbinInternalError(f"Unsupported integer width: {width}")
        view = self.scratch.view(width)
        self.source.readinto_exact(view, f"a {width}-byte integer")
        return struct.unpack(fmt, view)[0]

    def read_tag(self) -> int:
        """Read a one-byte structural type tag."""
        return self.read_uint(self.markers.TAG_WIDTH)

    def read_bool(self) -> bool:
        """Read a one-byte boolean; any nonzero byte is true."""
        return self.read_uint(self.markers.BOOL_WIDTH) != 0

    def read_string(self) -> memoryview:
        """Read a u16-length-prefixed string into the scratch buffer.

        Returns:
            View of exactly the string's bytes, valid until the next read
        """
        length = self.read_uint(self.markers.STRING_LENGTH_WIDTH)
        view = self.scratch.view(length)
        self.source.readinto_exact(view, f"a {length}-byte string")
        return view

    def read_text(self, encoding: str = "utf-8", errors: str = "replace") -> str:
        """Read a string and decode it to ``str``."""
        return str(self.read_string(), encoding, errors)
