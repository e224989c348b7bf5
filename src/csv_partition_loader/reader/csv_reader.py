"""Delimited record reader over a byte range of a file."""

import csv
import logging
import os
from collections.abc import Iterator
from contextlib import ExitStack
from typing import BinaryIO, TypeAlias

from csv_partition_loader.errors import DecodeError, OpenError
from csv_partition_loader.partition.types import InputUnit
from csv_partition_loader.reader.context import ScanContext, current_context

logger = logging.getLogger(__name__)

# 1MB buffer for efficient I/O.
BUFFER_SIZE = 1024 * 1024

Record: TypeAlias = tuple[str, ...]


class CsvRecordReader:
    """
    Sequential record reader for one InputUnit.

    A range owns every record that starts at or before its end offset, so the
    record straddling the boundary is read here and skipped by the next range.
    Dialect options come from the ScanContext bound when the reader is created.
    """

    def __init__(self, context: ScanContext | None = None):
        self._context = context if context is not None else current_context()
        self._handle: BinaryIO | None = None
        self._rows: Iterator[list[str]] | None = None
        self._path = ""
        self._pos = 0
        self._end = 0
        self._skip_header = False
        self._value: Record | None = None

    @property
    def position(self) -> int:
        """Byte offset just past the last line consumed."""
        return self._pos

    @property
    def current_value(self) -> Record:
        if self._value is None:
            raise RuntimeError("no current record; call next_key_value() first")
        return self._value

    def initialize(self, unit: InputUnit) -> None:
        """Open unit.path and position the reader at the first owned record."""
        self._path = unit.path
        self._end = unit.end

        with ExitStack() as stack:
            handle = stack.enter_context(open(unit.path, "rb", buffering=BUFFER_SIZE))  # noqa: SIM115
            size = os.fstat(handle.fileno()).st_size
            if unit.offset > size:
                raise OpenError(unit.path, f"offset {unit.offset} is past end of file ({size} bytes)")

            handle.seek(unit.offset)
            self._pos = unit.offset
            if unit.offset != 0:
                # The partial first line belongs to the previous range.
                self._pos += len(handle.readline())

            ctx = self._context
            self._rows = csv.reader(
                self._lines(handle),
                delimiter=ctx.delimiter,
                quotechar=ctx.quote_char,
                escapechar=ctx.escape_char,
                strict=ctx.strict,
            )
            self._skip_header = ctx.skip_header and unit.offset == 0
            self._handle = handle
            if unit.length == 0:
                # Zero-length ranges own no records.
                self._rows = None
            stack.pop_all()

        logger.debug("Opened %s [%d, %d)", unit.path, unit.offset, unit.end)

    def _lines(self, handle: BinaryIO) -> Iterator[str]:
        encoding = self._context.encoding
        for raw in iter(handle.readline, b""):
            self._pos += len(raw)
            yield raw.decode(encoding)

    def next_key_value(self) -> bool:
        """Advance to the next record; return False at the end of the range."""
        if self._rows is None:
            return False

        while True:
            if self._pos > self._end:
                return False

            start = self._pos
            try:
                row = next(self._rows)
            except StopIteration:
                return False
            except (csv.Error, UnicodeDecodeError) as exc:
                raise DecodeError(self._path, start, str(exc)) from exc

            if not row and self._context.skip_empty_lines:
                continue
            if len(row) > self._context.max_columns:
                raise DecodeError(
                    self._path,
                    start,
                    f"record has {len(row)} columns, limit is {self._context.max_columns}",
                )
            if self._skip_header:
                self._skip_header = False
                continue

            self._value = tuple(row)
            return True

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        handle, self._handle = self._handle, None
        self._rows = None
        self._value = None
        if handle is not None:
            handle.close()
