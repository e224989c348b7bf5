"""Lazy readers for input units."""

from csv_partition_loader.reader.context import ScanContext, bind_context, current_context
from csv_partition_loader.reader.csv_reader import CsvRecordReader, Record
from csv_partition_loader.reader.cursor import (
    CursorState,
    ReadFunction,
    RecordCursor,
    RecordReader,
    open_cursor,
)

__all__ = [
    "CsvRecordReader",
    "CursorState",
    "ReadFunction",
    "Record",
    "RecordCursor",
    "RecordReader",
    "ScanContext",
    "bind_context",
    "current_context",
    "open_cursor",
]
