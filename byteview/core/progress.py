"""
Progress signal shared between a render worker and its watchers.
"""

import threading
from typing import NamedTuple, Optional


class ProgressSnapshot(NamedTuple):
    percentage: float
    finished: bool


class ProgressSignal:
    """Thread-safe percentage / finished / cancelled state for one request.

    One writer (the decode worker) and any number of readers. ``finished`` is
    one-shot: once set it never reverts. ``cancelled`` may be requested by a
    consumer at any time; the writer checks it once per decode unit.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._percentage = 0.0
        self._finished = threading.Event()
        self._cancelled = threading.Event()

    @property
    def percentage(self) -> float:
        with self._lock:
            return self._percentage

    def set_percentage(self, value: float) -> None:
        """Store a percentage clamped to [0, 100]."""
        value = min(100.0, max(0.0, float(value)))
        with self._lock:
            self._percentage = value

    def is_finished(self) -> bool:
        return self._finished.is_set()

    def set_finished(self) -> None:
        """Mark the request finished. Idempotent."""
        self._finished.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def request_cancel(self) -> None:
        self._cancelled.set()

    def snapshot(self) -> ProgressSnapshot:
        """Read path for pollers."""
        return ProgressSnapshot(self.percentage, self.is_finished())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until finished; returns False on timeout."""
        return self._finished.wait(timeout)

    def __repr__(self) -> str:
        return (
            f"ProgressSignal(percentage={self.percentage:.1f}, "
            f"finished={self.is_finished()}, cancelled={self.is_cancelled()})"
        )


class ProgressPhase:
    """One stage of a multi-stage request, mapped onto part of a signal.

    Writers that report 0-100 for their own stage (file read, decode) are
    handed a phase instead of the request's signal, so the request's
    percentage climbs once from 0 to 100 across all stages.

    Args:
        signal: The request's signal.
        start: Percentage of ``signal`` where this stage begins.
        end: Percentage of ``signal`` where this stage ends.
    """

    def __init__(self, signal: ProgressSignal, start: float, end: float):
        if not 0 <= start <= end <= 100:
            raise ValueError(f"Invalid progress phase: [{start}, {end}]")
        self.signal = signal
        self.start = start
        self.end = end

    @property
    def percentage(self) -> float:
        """Progress within this stage."""
        span = self.end - self.start
        if span == 0:
            return 100.0
        done = (self.signal.percentage - self.start) / span * 100
        return min(100.0, max(0.0, done))

    def set_percentage(self, value: float) -> None:
        value = min(100.0, max(0.0, float(value)))
        self.signal.set_percentage(self.start + (self.end - self.start) * value / 100)

    def is_cancelled(self) -> bool:
        return self.signal.is_cancelled()

    def __repr__(self) -> str:
        return f"ProgressPhase([{self.start}, {self.end}] of {self.signal!r})"
