"""Centralized configuration for pybfbin.

This module provides configuration classes for decoding and for the
high-level loaders built on top of the decoder.
"""

import codecs
import os
from dataclasses import dataclass, field

# Buffer this many bytes of input data for improved performance.
DEFAULT_READ_BUFFER_SIZE = 10 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class ParsingConfig:
    """Configuration for binary decoding.

    Attributes:
        read_buffer_size: Size in bytes of the input read buffer (default: 10 MiB)
        string_encoding: Text encoding used to present strings to handlers (default: "utf-8")
        string_errors: Codec error policy for undecodable bytes (default: "replace")
    """

    read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE
    string_encoding: str = "utf-8"
    string_errors: str = "replace"

    def __post_init__(self) -> None:
        """Validate parsing configuration."""
        if self.read_buffer_size <= 0:
            raise ValueError("read_buffer_size must be positive")
        try:
            codecs.lookup(self.string_encoding)
        except LookupError as e:
            raise ValueError(f"Unknown string_encoding: {self.string_encoding}") from e
        try:
            codecs.lookup_error(self.string_errors)
        except LookupError as e:
            raise ValueError(f"Unknown string_errors: {self.string_errors}") from e


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    """Configuration for the table loaders.

    Attributes:
        embed_file_hash: Whether to embed a BLAKE2b file hash in table metadata (default: True)
        max_hash_size_mb: Maximum file size in MB to hash (default: 1000)
    """

    embed_file_hash: bool = True
    max_hash_size_mb: int = 1000

    def __post_init__(self) -> None:
        """Validate loader configuration."""
        if self.max_hash_size_mb <= 0:
            raise ValueError("max_hash_size_mb must be positive")


@dataclass(frozen=True)
class PyBfbinConfig:
    """Main configuration container for pybfbin.

    Attributes:
        parsing: Configuration for binary decoding
        loader: Configuration for the table loaders

    Examples:
        >>> config = PyBfbinConfig()
        >>> config = PyBfbinConfig(
        ...     parsing=ParsingConfig(read_buffer_size=1 << 20),
        ...     loader=LoaderConfig(embed_file_hash=False),
        ... )
        >>> config.parsing.string_encoding
        'utf-8'
    """

    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)

    @classmethod
    def from_env(cls) -> "PyBfbinConfig":
        """Create configuration from environment variables.

        Supported environment variables:
        - PYBFBIN_READ_BUFFER_SIZE: Read buffer size in bytes
        - PYBFBIN_STRING_ENCODING: Text encoding for decoded strings
        - PYBFBIN_EMBED_FILE_HASH: Whether to hash input files (true/false)

        Returns:
            Configuration instance with values from environment
        """
        parsing_config = ParsingConfig(
            read_buffer_size=int(
                os.getenv("PYBFBIN_READ_BUFFER_SIZE", str(DEFAULT_READ_BUFFER_SIZE))
            ),
            string_encoding=os.getenv("PYBFBIN_STRING_ENCODING", "utf-8"),
        )

        loader_config = LoaderConfig(
            embed_file_hash=os.getenv("PYBFBIN_EMBED_FILE_HASH", "true").lower()
            == "true",
        )

        return cls(parsing=parsing_config, loader=loader_config)


# Global default configuration
DEFAULT_CONFIG = PyBfbinConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_READ_BUFFER_SIZE",
    "LoaderConfig",
    "ParsingConfig",
    "PyBfbinConfig",
]
