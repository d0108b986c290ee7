"""Exception types raised while turning log streams into tables."""


class LogFrameError(Exception):
    """Base class for every error raised by logframes."""


class InvalidTimestamp(LogFrameError, ValueError):
    """A nanosecond timestamp string is not a non-negative base-10 integer."""


class MalformedStream(LogFrameError, ValueError):
    """A stream, entry or row does not have the expected shape."""


class InvalidMatcherConfig(LogFrameError, ValueError):
    """Derived field or merger configuration failed validation."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors or [message])


class InvalidCapacity(LogFrameError, ValueError):
    """A circular table was constructed with a capacity below 1."""


class IndexOutOfRange(LogFrameError, IndexError):
    """A row index falls outside the rows currently held by a table."""
