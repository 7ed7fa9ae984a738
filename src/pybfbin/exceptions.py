"""
Custom exceptions for Byfl binary table stream decoding.
"""

__all__ = [
    "BfbinAllocationError",
    "BfbinError",
    "BfbinHandlerSetMismatchError",
    "BfbinIOError",
    "BfbinInternalError",
    "BfbinMalformedHeaderError",
    "BfbinTruncatedInputError",
]


class BfbinError(Exception):
    """Base exception for binary table stream decoding errors."""


class BfbinHandlerSetMismatchError(BfbinError):
    """Raised when a handler set was built for a different event contract."""


class BfbinIOError(BfbinError):
    """Raised when the input resource cannot be opened or closed."""


class BfbinTruncatedInputError(BfbinError):
    """Raised when fewer bytes are available than the grammar requires.

    Attributes:
        offset: Byte offset at which the short read started
        reason: Underlying system error text, or a description of the short read
    """

    def __init__(self, message: str, offset: int = 0, reason: str = "") -> None:
        super().__init__(message)
        self.offset = offset
        self.reason = reason


class BfbinMalformedHeaderError(BfbinError):
    """Raised when the file does not start with the format's magic marker."""


class BfbinAllocationError(BfbinError):
    """Raised when the scratch buffer cannot grow."""


class BfbinInternalError(BfbinError):
    """Raised when an out-of-range type tag reaches the grammar walker."""
