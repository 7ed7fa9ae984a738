"""File hashing utilities for pybfbin."""

import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def get_hash(path: str | Path, max_size_mb: int = 1000) -> str | None:
    """Generate file hash for embedded table metadata.

    Args:
        path: Path to the file to hash
        max_size_mb: Maximum file size in MB to hash (default: 1000MB)

    Returns:
        BLAKE2b hash as hex string, or None if hashing fails
    """
    path = Path(path)
    try:
        file_size = path.stat().st_size
        max_size_bytes = max_size_mb * 1024 * 1024

        if file_size > max_size_bytes:
            logger.warning(
                f"File too large for hashing ({file_size // (1024 * 1024)} MB > {max_size_mb} MB): {path}"
            )
            return None

        digest = hashlib.blake2b()
        with path.open("rb") as file:
            for chunk in iter(lambda: file.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()
    except FileNotFoundError:
        logger.warning(f"File not found while generating hash: {path}")
        return None
    except PermissionError:
        logger.error(f"Permission denied while generating hash for file: {path}")
        return None
    except OSError as e:
        logger.error(f"OS error while generating hash for file {path}: {e}")
        return None
