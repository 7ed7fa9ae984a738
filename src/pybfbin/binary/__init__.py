"""
Binary decoding primitives for Byfl binary table streams.
"""

from .buffer import ScratchBuffer
from .codec import ScalarCodec
from .handlers import (
    BoolHandler,
    StringHandler,
    Uint64Handler,
    ValueHandler,
    ValueHandlerRegistry,
)
from .source import ByteSource

__all__ = [
    "BoolHandler",
    "ByteSource",
    "ScalarCodec",
    "ScratchBuffer",
    "StringHandler",
    "Uint64Handler",
    "ValueHandler",
    "ValueHandlerRegistry",
]
