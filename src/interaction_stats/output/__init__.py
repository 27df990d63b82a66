"""CSV output for classified rows."""

from .csv_writer import render_rows, write_rows

__all__ = ["render_rows", "write_rows"]
