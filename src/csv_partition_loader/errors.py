"""Error types raised by planning and reading."""


class CsvLoaderError(Exception):
    """Base class for all loader errors."""


class PackingConfigError(CsvLoaderError, ValueError):
    """Invalid packing configuration (non-positive parallelism, etc.)."""


class OpenError(CsvLoaderError, OSError):
    """The read resource for an input unit could not be acquired."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

    def __reduce__(self):
        return type(self), (self.path, self.message)


class DecodeError(CsvLoaderError, ValueError):
    """Malformed record content encountered mid-stream."""

    def __init__(self, path: str, position: int, message: str):
        super().__init__(f"{path} (near byte {position}): {message}")
        self.path = path
        self.position = position
        self.message = message

    def __reduce__(self):
        return type(self), (self.path, self.position, self.message)


class ExhaustedError(CsvLoaderError, RuntimeError):
    """A cursor was asked for a record it has not confirmed (or after exhaustion)."""
