"""Lazy, single-pass record cursor over one input unit."""

import enum
import logging
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Protocol, Self, TypeAlias

from csv_partition_loader.errors import ExhaustedError, OpenError
from csv_partition_loader.partition.types import InputUnit
from csv_partition_loader.reader.context import ScanContext, bind_context
from csv_partition_loader.reader.csv_reader import CsvRecordReader, Record

logger = logging.getLogger(__name__)


class RecordReader(Protocol):
    """Sequential reader interface the cursor drives."""

    def initialize(self, unit: InputUnit) -> None: ...

    def next_key_value(self) -> bool: ...

    @property
    def current_value(self) -> Record: ...

    def close(self) -> None: ...


ReaderFactory: TypeAlias = Callable[[], RecordReader | None]


class CursorState(enum.Enum):
    OPEN = "open"
    EXHAUSTED = "exhausted"


class RecordCursor:
    """
    Forward-only record sequence for one InputUnit.

    has_next() confirms the next record without consuming it, next() hands it
    over. The reader is released exactly once: when the range is drained, when
    decoding fails, or when the cursor is closed early.
    """

    def __init__(self, unit: InputUnit, context: ScanContext, reader: RecordReader | None):
        self.unit = unit
        self.records_read = 0
        self._context = context
        self._reader = reader
        self._pending = False
        self._current: Record | None = None
        # A reader that was never acquired leaves the cursor already drained.
        self._state = CursorState.OPEN if reader is not None else CursorState.EXHAUSTED

    @property
    def state(self) -> CursorState:
        return self._state

    def has_next(self) -> bool:
        """Return True if a record is available; repeated calls do not advance."""
        if self._state is CursorState.EXHAUSTED:
            return False
        if self._pending:
            return True

        try:
            with bind_context(self._context):
                advanced = self._reader.next_key_value()
                if advanced:
                    self._current = self._reader.current_value
        except BaseException:
            # The read error wins over any failure to close.
            self._release(suppress_errors=True)
            raise
        if not advanced:
            self._release()

        self._pending = advanced
        return advanced

    def next(self) -> Record:
        """Return the record confirmed by the last has_next() call."""
        if not self._pending:
            if self._state is CursorState.EXHAUSTED:
                raise ExhaustedError(f"cursor over {self.unit.path} is exhausted")
            raise ExhaustedError("next() called without a confirming has_next()")

        self._pending = False
        self.records_read += 1
        record, self._current = self._current, None
        return record

    def close(self) -> None:
        """Release the reader if it is still held. Safe to call more than once."""
        self._release()

    def _release(self, suppress_errors: bool = False) -> None:
        self._state = CursorState.EXHAUSTED
        self._pending = False
        self._current = None
        reader, self._reader = self._reader, None
        if reader is not None:
            try:
                with bind_context(self._context):
                    reader.close()
            except Exception:
                if not suppress_errors:
                    raise
                logger.warning("Failed to close reader for %s", self.unit.path, exc_info=True)
                return
            logger.debug("Closed %s after %d records", self.unit.path, self.records_read)

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> Record:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_cursor(
    unit: InputUnit,
    context: ScanContext,
    reader_factory: ReaderFactory = CsvRecordReader,
) -> RecordCursor:
    """
    Acquire a reader for unit and wrap it in a RecordCursor.

    The context is bound while the reader is created and initialized. If
    initialization fails the reader is closed before OpenError propagates.

    Raises:
        OpenError: The file could not be opened or the range is invalid.
    """
    with bind_context(context):
        try:
            reader = reader_factory()
            if reader is not None:
                with ExitStack() as stack:
                    stack.callback(reader.close)
                    reader.initialize(unit)
                    stack.pop_all()
        except OpenError:
            raise
        except OSError as exc:
            raise OpenError(unit.path, exc.strerror or str(exc)) from exc

    if reader is None:
        logger.warning("No reader acquired for %s, treating as empty", unit.path)
    return RecordCursor(unit, context, reader)


@dataclass(frozen=True, slots=True)
class ReadFunction:
    """Picklable per-unit cursor factory handed to the execution layer."""

    context: ScanContext
    reader_factory: ReaderFactory = CsvRecordReader

    def __call__(self, unit: InputUnit) -> RecordCursor:
        return open_cursor(unit, self.context, self.reader_factory)
