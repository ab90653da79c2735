"""
Byte-stream decoder

Turns a byte range of a loaded buffer into display text under one of the
DataTypeMode encodings. Output is produced lazily in fixed-size chunks so a
consumer can append text while progress is reported on a ProgressSignal.

Decode units:
- byte modes (bytes, chars, hex, utf8-bytes, utf16-bytes): one byte
- text codec modes (utf8-chars, utf16-chars): one decoded character

Cancellation is checked before every unit. Malformed UTF input is replaced
with U+FFFD and never raised.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Sequence, Union

from .errors import NullInputError, UnknownModeError
from .progress import ProgressPhase, ProgressSignal

logger = logging.getLogger(__name__)

# Units per flushed chunk
DEFAULT_CHUNK_SIZE = 600

# Units between cooperative sleeps
DEFAULT_YIELD_EVERY = 100

# Seconds slept every DEFAULT_YIELD_EVERY units
DEFAULT_YIELD_DELAY = 0.001

UTF16_BOM_BE = b"\xfe\xff"
UTF16_BOM_LE = b"\xff\xfe"


class DataTypeMode(Enum):
    """Encoding used to render bytes as text."""

    BYTES = "bytes"
    CHARACTERS = "chars"
    HEX = "hex"
    UTF8_BYTES = "utf8-bytes"
    UTF8_CHARACTERS = "utf8-chars"
    UTF16_BYTES = "utf16-bytes"
    UTF16_CHARACTERS = "utf16-chars"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @classmethod
    def choices(cls) -> list:
        return [mode.value for mode in cls]

    @classmethod
    def from_value(cls, value: Union[str, "DataTypeMode"]) -> "DataTypeMode":
        """Parse a mode name at the boundary (CLI, config, UI).

        Raises:
            ValueError: value is not one of choices().
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown data type: {value} (choices: {', '.join(cls.choices())})"
            ) from None


_MODE_LABELS: Dict[DataTypeMode, str] = {
    DataTypeMode.BYTES: "Byte Values",
    DataTypeMode.CHARACTERS: "Char Values",
    DataTypeMode.HEX: "Hex Values",
    DataTypeMode.UTF8_CHARACTERS: "UTF-8 Values",
    DataTypeMode.UTF8_BYTES: "UTF-8 Codes",
    DataTypeMode.UTF16_CHARACTERS: "UTF-16 Values",
    DataTypeMode.UTF16_BYTES: "UTF-16 Codes",
}


def _format_number(unit: int) -> str:
    return f"{unit} "


def _format_hex(unit: int) -> str:
    return f"{unit:02x} "


def _format_passthrough(unit: str) -> str:
    return unit


# Exhaustive over DataTypeMode; a missing entry is an UnknownModeError.
_FORMATTERS: Dict[DataTypeMode, Callable] = {
    DataTypeMode.BYTES: _format_number,
    DataTypeMode.UTF8_BYTES: _format_number,
    DataTypeMode.UTF16_BYTES: _format_number,
    DataTypeMode.CHARACTERS: chr,
    DataTypeMode.HEX: _format_hex,
    DataTypeMode.UTF8_CHARACTERS: _format_passthrough,
    DataTypeMode.UTF16_CHARACTERS: _format_passthrough,
}


def decode_utf16(raw: bytes) -> str:
    """Decode UTF-16, honouring a leading BOM and defaulting to big endian.

    Only the BOM at the start of ``raw`` is seen. Each page is decoded on its
    own, so pages after the first of a little-endian file with a BOM are read
    big endian, and a page boundary falling inside a code unit shifts the
    byte pairing for that page.
    """
    if raw[:2] == UTF16_BOM_BE:
        return raw[2:].decode("utf-16-be", errors="replace")
    if raw[:2] == UTF16_BOM_LE:
        return raw[2:].decode("utf-16-le", errors="replace")
    return raw.decode("utf-16-be", errors="replace")


class Decoder:
    """Chunked, cancellable byte-range decoder.

    Args:
        chunk_size: Units joined into one emitted chunk.
        yield_every: Units between cooperative sleeps.
        yield_delay: Seconds to sleep at each yield point.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        yield_every: int = DEFAULT_YIELD_EVERY,
        yield_delay: float = DEFAULT_YIELD_DELAY,
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive: {chunk_size}")
        if yield_every <= 0:
            raise ValueError(f"yield_every must be positive: {yield_every}")

        self.chunk_size = chunk_size
        self.yield_every = yield_every
        self.yield_delay = max(0.0, yield_delay)

    def iter_chunks(
        self,
        data: Optional[bytes],
        mode: DataTypeMode,
        start: int,
        end: int,
        signal: Optional[Union[ProgressSignal, ProgressPhase]] = None,
    ) -> Iterator[str]:
        """Yield display chunks for ``data[start:end]`` in offset order.

        Stops early, without yielding the partial chunk, once the signal is
        cancelled. Never marks the signal finished; that belongs to the
        caller that owns it.

        Raises:
            NullInputError: data is None.
            UnknownModeError: mode is not a DataTypeMode.
            ValueError: start/end do not form a valid range.
        """
        if data is None:
            logger.error("Data cannot be null. Returning.")
            raise NullInputError()

        formatter = _FORMATTERS.get(mode)
        if formatter is None:
            logger.error("No Data Type detected when rendering output: %r", mode)
            raise UnknownModeError(f"No Data Type detected: {mode!r}")

        if signal is None:
            signal = ProgressSignal()

        units = self._units(data, mode, start, end)
        total = len(units)
        signal.set_percentage(0)

        parts = []
        for count, unit in enumerate(units, 1):
            if signal.is_cancelled():
                logger.debug("Decode cancelled after %d of %d units", count - 1, total)
                return

            parts.append(formatter(unit))

            if count % self.chunk_size == 0:
                signal.set_percentage(100 * count / total)
                yield "".join(parts)
                parts = []

            if count % self.yield_every == 0:
                time.sleep(self.yield_delay)

        if parts:
            yield "".join(parts)

        signal.set_percentage(100)

    def decode(
        self,
        data: Optional[bytes],
        mode: DataTypeMode,
        start: int,
        end: int,
        signal: Optional[Union[ProgressSignal, ProgressPhase]] = None,
        on_chunk: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Decode a range to a single string.

        Chunks are passed to ``on_chunk`` as they are flushed. When the
        signal is cancelled the text produced so far is returned and the
        caller is expected to check ``signal.is_cancelled()``.
        """
        chunks = []
        for chunk in self.iter_chunks(data, mode, start, end, signal):
            chunks.append(chunk)
            if on_chunk is not None:
                on_chunk(chunk)
        return "".join(chunks)

    def _units(
        self, data: bytes, mode: DataTypeMode, start: int, end: int
    ) -> Sequence:
        if start < 0 or end < start:
            raise ValueError(f"Invalid byte range: [{start}, {end})")

        # An end past the buffer is clamped, as is a start at or past it.
        end = min(end, len(data))
        start = min(start, end)
        raw = bytes(data[start:end])

        if mode is DataTypeMode.UTF8_CHARACTERS:
            return raw.decode("utf-8", errors="replace")
        if mode is DataTypeMode.UTF16_CHARACTERS:
            return decode_utf16(raw)
        return raw
