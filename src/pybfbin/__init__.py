# SPDX-FileCopyrightText: 2025-present GraysonBellamy <gbellamy@umd.edu>
#
# SPDX-License-Identifier: MIT

"""
pybfbin: A Python library for decoding Byfl binary table streams.
"""

from importlib.metadata import PackageNotFoundError, version

from .api.loaders import TableCollector, read_bfbin, read_bfbin_frames
from .config import DEFAULT_CONFIG, LoaderConfig, ParsingConfig, PyBfbinConfig
from .constants import BinaryMarkers, ColumnType, RowType, TableType
from .core import (
    EVENT_NAMES,
    HANDLER_SET_SIZE,
    BfbinHandler,
    ParseSession,
    decode,
)
from .exceptions import (
    BfbinAllocationError,
    BfbinError,
    BfbinHandlerSetMismatchError,
    BfbinInternalError,
    BfbinIOError,
    BfbinMalformedHeaderError,
    BfbinTruncatedInputError,
)

try:
    __version__ = version("pybfbin")
except PackageNotFoundError:
    __version__ = "0.0.0"
__author__ = "Grayson Bellamy"
__email__ = "gbellamy@umd.edu"

__all__ = [
    "DEFAULT_CONFIG",
    "EVENT_NAMES",
    "HANDLER_SET_SIZE",
    "BfbinAllocationError",
    "BfbinError",
    "BfbinHandler",
    "BfbinHandlerSetMismatchError",
    "BfbinIOError",
    "BfbinInternalError",
    "BfbinMalformedHeaderError",
    "BfbinTruncatedInputError",
    "BinaryMarkers",
    "ColumnType",
    "LoaderConfig",
    "ParseSession",
    "ParsingConfig",
    "PyBfbinConfig",
    "RowType",
    "TableCollector",
    "TableType",
    "__author__",
    "__email__",
    "__version__",
    # Decoding
    "decode",
    # Loaders
    "read_bfbin",
    "read_bfbin_frames",
]
