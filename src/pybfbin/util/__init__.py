"""
Utility functions for pybfbin.
"""

from .hashing import get_hash

__all__ = ["get_hash"]
