#!/usr/bin/env python3
"""
Example: Summarizing a Byfl binary output file with a custom handler set

Counts rows per table and sums every unsigned integer column, without
holding any decoded rows in memory.

Usage:
    python examples/table_summary_example.py run.byfl
"""

import sys
from collections import Counter

from pybfbin import HANDLER_SET_SIZE, BfbinHandler, decode


class SummaryHandler(BfbinHandler):
    """Accumulates per-table row counts and per-column integer totals."""

    def __init__(self):
        self.table = None
        self.columns = []
        self.column_index = 0

    def on_table_basic(self, ctx, name):
        self.table = name
        self.columns = []
        self.column_index = 0

    def on_table_keyval(self, ctx, name):
        # Keys are declared one at a time, each followed by its value.
        self.table = name
        self.columns = []
        self.column_index = 0

    def on_column_uint64(self, ctx, name):
        self.columns.append(name)

    def on_column_string(self, ctx, name):
        self.columns.append(name)

    def on_column_bool(self, ctx, name):
        self.columns.append(name)

    def on_row_begin(self, ctx):
        self.column_index = 0
        ctx["rows"][self.table] += 1

    def on_data_uint64(self, ctx, value):
        ctx["totals"][(self.table, self.columns[self.column_index])] += value
        self.column_index += 1

    def on_data_string(self, ctx, value):
        self.column_index += 1

    def on_data_bool(self, ctx, value):
        self.column_index += 1

    def on_error(self, ctx, message):
        print(f"error: {message}", file=sys.stderr)


def main():
    if len(sys.argv) != 2:
        print(__doc__)
        return 2

    summary = {"rows": Counter(), "totals": Counter()}
    if not decode(sys.argv[1], SummaryHandler(), HANDLER_SET_SIZE, summary):
        return 1

    for table, rows in summary["rows"].items():
        print(f"{table}: {rows} rows")
    for (table, column), total in summary["totals"].most_common(10):
        print(f"  {table} / {column}: {total}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
