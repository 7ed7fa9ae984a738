"""
High-level API for pybfbin.
"""

from .loaders import CollectedTable, TableCollector, read_bfbin, read_bfbin_frames

__all__ = ["CollectedTable", "TableCollector", "read_bfbin", "read_bfbin_frames"]
