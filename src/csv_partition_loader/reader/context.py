"""Task-local scan context resolved by record readers."""

import codecs
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

# Default upper bound on fields per record.
DEFAULT_MAX_COLUMNS = 20000

# Lines are split on b"\n", so the codec must encode these as plain ASCII.
_ASCII_SAMPLE = "\r\n,;|\t\"'azAZ09"


@dataclass(frozen=True, slots=True)
class ScanContext:
    """CSV dialect and decoding options shared by all readers of one scan."""

    delimiter: str = ","
    quote_char: str = '"'
    escape_char: str | None = None
    encoding: str = "utf-8"
    skip_header: bool = False
    skip_empty_lines: bool = True
    strict: bool = True
    max_columns: int = DEFAULT_MAX_COLUMNS

    def __post_init__(self) -> None:
        for name in ("delimiter", "quote_char"):
            value = getattr(self, name)
            if len(value) != 1:
                raise ValueError(f"{name} must be a single character, got {value!r}")
        if self.escape_char is not None and len(self.escape_char) != 1:
            raise ValueError(f"escape_char must be a single character, got {self.escape_char!r}")
        if self.max_columns < 1:
            raise ValueError(f"max_columns must be >= 1, got {self.max_columns}")
        check_encoding(self.encoding)


def check_encoding(encoding: str) -> None:
    """Raise ValueError unless encoding is a known ASCII-compatible text codec."""
    try:
        encoder = codecs.getincrementalencoder(encoding)()
        # Skip any signature a codec like utf-8-sig emits on first use.
        encoder.encode("")
        encoded = encoder.encode(_ASCII_SAMPLE)
    except LookupError:
        raise ValueError(f"unknown encoding: {encoding!r}") from None
    except (TypeError, UnicodeError):
        # Bytes-to-bytes codecs such as base64 reject text input.
        encoded = b""
    if encoded != _ASCII_SAMPLE.encode("ascii"):
        raise ValueError(f"encoding {encoding!r} is not ASCII-compatible")


_active_context: ContextVar[ScanContext] = ContextVar("scan_context")


def current_context() -> ScanContext:
    """Return the context bound to the current thread or task."""
    try:
        return _active_context.get()
    except LookupError:
        raise LookupError("no ScanContext is bound; use bind_context()") from None


@contextmanager
def bind_context(context: ScanContext) -> Iterator[ScanContext]:
    """Bind context for the duration of the block, restoring the previous binding."""
    token = _active_context.set(context)
    try:
        yield context
    finally:
        _active_context.reset(token)
