"""Phase timing, reported through an injectable reporter."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from time import perf_counter
from typing import Iterator, List, Optional, Protocol, TextIO, Tuple


class TimingReporter(Protocol):
    def report(self, phase: str, elapsed_ms: float) -> None:
        ...


class NullTimingReporter:
    """Discards all timings."""

    def report(self, phase: str, elapsed_ms: float) -> None:
        return None


class StderrTimingReporter:
    """Prints ``Done <phase>: <n>ms`` to the diagnostic stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def report(self, phase: str, elapsed_ms: float) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        print(f"Done {phase}: {int(elapsed_ms)}ms", file=stream)


class RecordingTimingReporter:
    """Keeps (phase, elapsed_ms) pairs in call order."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, float]] = []

    def report(self, phase: str, elapsed_ms: float) -> None:
        self.records.append((phase, elapsed_ms))

    @property
    def phases(self) -> List[str]:
        return [phase for phase, _ in self.records]


@contextmanager
def timed(reporter: Optional[TimingReporter], phase: str) -> Iterator[None]:
    """Measure the enclosed block and report it once it completes."""
    start = perf_counter()
    yield
    if reporter is not None:
        reporter.report(phase, (perf_counter() - start) * 1000.0)
