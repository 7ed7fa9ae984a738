"""
Growable scratch buffer reused across string decodes.
"""

from __future__ import annotations

from ..exceptions import BfbinAllocationError

__all__ = ["ScratchBuffer"]


class ScratchBuffer:
    """Owned, growable byte buffer holding the most recently decoded value.

    ``ensure_capacity`` is the only place capacity is checked or grown.
    Views returned by ``view`` alias the buffer and are invalidated by the
    next call that writes into it.
    """

    def __init__(self, initial_capacity: int = 8) -> None:
        self._data = bytearray(initial_capacity)

    @property
    def capacity(self) -> int:
        return len(self._data)

    def ensure_capacity(self, n: int) -> None:
        """Grow the buffer so that it holds at least ``n`` bytes.

        Raises:
            BfbinAllocationError: If the buffer cannot be grown
        """
        if n <= len(self._data):
            return
        new_capacity = max(n, 2 * len(self._data))
        try:
            self._data = bytearray(new_capacity)
        except MemoryError as e:
            raise BfbinAllocationError(
                f"Failed to allocate {new_capacity} bytes of memory"
            ) from e

    def view(self, n: int) -> memoryview:
        """Return a writable view over the first ``n`` bytes."""
        self.ensure_capacity(n)
        return memoryview(self._data)[:n]

    def release(self) -> None:
        self._data = bytearray()
