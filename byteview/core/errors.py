"""
Error types raised by the byteview core.
"""


class ByteViewError(Exception):
    """Base class for recoverable viewer errors."""

    message = "Unexpected viewer error."

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class LoadTooLargeError(ByteViewError):
    """File exceeds the configured size cap."""

    message = "File size was too large."


class FileLoadError(ByteViewError):
    """File could not be read."""

    message = "File could not be loaded."


class NoDataLoadedError(ByteViewError):
    """A render was requested before any data was loaded."""

    message = "No data loaded."


class NoMoreDataError(ByteViewError):
    """Navigation past the last page."""

    message = "No more data."


class NullInputError(ByteViewError):
    """The decoder was handed no buffer."""

    message = "Data cannot be null."


class UnknownModeError(AssertionError):
    """A value outside DataTypeMode reached the decoder.

    Not a ByteViewError: this is a programming error and is never turned into
    a RenderResult.
    """
