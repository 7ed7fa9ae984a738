"""Command-line interface for pybfbin."""

import argparse
import logging
import re
import sys
from pathlib import Path

import polars as pl
import pyarrow as pa
import pyarrow.parquet as pq

from ..config import PyBfbinConfig
from ..exceptions import BfbinError
from .loaders import read_bfbin, unique_name

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Convert Byfl binary output files to Parquet or CSV"
    )
    parser.add_argument("input", help="Input binary output file path")
    parser.add_argument("-o", "--output", help="Output directory", default=".")
    parser.add_argument(
        "-f",
        "--format",
        choices=["parquet", "csv", "all"],
        default="parquet",
        help="Output format",
    )
    parser.add_argument(
        "-t",
        "--table",
        action="append",
        dest="tables",
        metavar="NAME",
        help="Only write the named table (may be repeated)",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List tables and their shapes instead of writing files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    return parser


def validate_input_file(input_path: Path) -> None:
    """Validate input file exists and is a regular file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If path is not a file
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input file does not exist: {input_path}")

    if not input_path.is_file():
        raise ValueError(f"Input path is not a file: {input_path}")


def validate_output_directory(output_path: Path) -> None:
    """Validate output directory is writable.

    Raises:
        PermissionError: If directory is not writable
        OSError: If directory cannot be created
    """
    output_path.mkdir(parents=True, exist_ok=True)

    test_file = output_path / ".write_test"
    try:
        test_file.touch()
        test_file.unlink()
    except (PermissionError, OSError) as e:
        raise PermissionError(
            f"Cannot write to output directory {output_path}: {e}"
        ) from e


def table_file_stem(base_name: str, table_name: str) -> str:
    """Return ``<base>.<table>`` with the table name made filename-safe."""
    safe = _UNSAFE_FILENAME_CHARS.sub("_", table_name).strip("_") or "table"
    return f"{base_name}.{safe}"


def write_output_files(
    data: pa.Table,
    output_path: Path,
    stem: str,
    output_format: str,
) -> None:
    """Write one table to output file(s).

    Args:
        data: PyArrow Table to write
        output_path: Directory to write files to
        stem: Filename without extension
        output_format: Output format ("parquet", "csv", or "all")
    """
    if output_format in ("parquet", "all"):
        parquet_file = output_path / f"{stem}.parquet"
        pq.write_table(data, parquet_file, compression="snappy")
        logger.debug(f"Wrote Parquet file: {parquet_file}")

    if output_format in ("csv", "all"):
        df = pl.from_arrow(data)
        if isinstance(df, pl.DataFrame):
            csv_file = output_path / f"{stem}.csv"
            df.write_csv(csv_file)
            logger.debug(f"Wrote CSV file: {csv_file}")


def main(argv: list[str] | None = None) -> int:
    """Command-line interface for the binary output decoder.

    Usage:
        python -m pybfbin input.byfl [options]

    Examples:
        # One Parquet file per table (default)
        python -m pybfbin run.byfl

        # CSV for a single table
        python -m pybfbin run.byfl -f csv -t Functions

        # Show what the file contains
        python -m pybfbin run.byfl --list

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=(logging.DEBUG if args.verbose else logging.INFO))

    try:
        input_path = Path(args.input)
        validate_input_file(input_path)

        tables = read_bfbin(input_path, config=PyBfbinConfig.from_env())

        if args.tables:
            missing = [name for name in args.tables if name not in tables]
            if missing:
                raise ValueError(f"Table(s) not found in {args.input}: {missing}")
            tables = {name: tables[name] for name in args.tables}

        if args.list:
            for name, table in tables.items():
                metadata = table.schema.metadata or {}
                kind = metadata.get(b"table_kind", b"").decode()
                num_rows = int(metadata.get(b"num_rows", table.num_rows))
                print(f"{name}\t{kind}\t{num_rows} x {table.num_columns}")
            return 0

        output_path = Path(args.output)
        validate_output_directory(output_path)

        stems: set[str] = set()
        for name, table in tables.items():
            if table.num_columns == 0:
                logger.info(f"Skipping table '{name}': it has no columns")
                continue
            # Distinct table names may sanitize to the same file name.
            stem = unique_name(table_file_stem(input_path.stem, name), stems)
            stems.add(stem)
            write_output_files(table, output_path, stem, args.format)

        logger.info(f"Successfully converted {len(tables)} tables from {args.input}")
        return 0

    except Exception as e:
        match e:
            case FileNotFoundError() | ValueError() | PermissionError():
                logger.error(str(e))
            case BfbinError():
                logger.error(f"Failed to decode {args.input}: {e}")
            case OSError():
                logger.error(f"OS error while processing file {args.input}: {e}")
            case _:
                logger.error(f"Unexpected error while converting file {args.input}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
