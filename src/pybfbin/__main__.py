"""Module entry point for `python -m pybfbin`.

This forwards to the canonical CLI implementation in `pybfbin.api.cli.main`.
"""

import sys

from .api.cli import main

if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
