import sys
import time
from typing import Callable, Optional, TextIO


BAR_WIDTH = 50
MIB = 1024 * 1024


def format_duration(seconds: float) -> str:
    secs = int(seconds)
    if secs < 60:
        return f"{secs}s"
    return f"{secs // 60}m {secs % 60}s"


def render_bar(percent: float, width: int = BAR_WIDTH) -> str:
    filled = int(percent * width)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def estimate_remaining(elapsed: float, percent: float) -> float:
    if percent > 0:
        return elapsed / percent - elapsed
    return 0.0


class ProgressReporter:
    """
    Redraws a single terminal line with scan progress.

    Called with the bytes consumed so far and the total size of the source
    (None when the size is unknown, in which case only the byte count and
    elapsed time are shown). The final call ends the line.
    """

    def __init__(self, stream: Optional[TextIO] = None, width: int = BAR_WIDTH,
                 clock: Callable[[], float] = time.monotonic):
        if width <= 0:
            raise ValueError(f"Bar width must be positive, got {width}")
        self.stream = stream
        self.width = width
        self.clock = clock
        self._start = None
        self._line_open = False

    def start(self):
        self._start = self.clock()

    def finish(self):
        """End a redraw line left open by an interrupted scan."""
        if self._line_open:
            self._stream().write("\n")
            self._stream().flush()
            self._line_open = False

    def __call__(self, consumed: int, total_size: Optional[int] = None, final: bool = False):
        if self._start is None:
            self.start()
        elapsed = self.clock() - self._start

        if total_size is None:
            line = self.format_count_only(consumed, elapsed)
        else:
            line = self.format_line(self._percent(consumed, total_size), elapsed)

        stream = self._stream()
        stream.write("\r" + line)
        if final:
            stream.write("\n")
        self._line_open = not final
        stream.flush()

    def _stream(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def format_line(self, percent: float, elapsed: float) -> str:
        eta = estimate_remaining(elapsed, percent)
        return (f"{render_bar(percent, self.width)} {percent * 100:6.2f}% | "
                f"Elapsed: {format_duration(elapsed)} | ETA: {format_duration(eta)}")

    def format_count_only(self, consumed: int, elapsed: float) -> str:
        return f"Processed: {consumed / MIB:.2f} MiB | Elapsed: {format_duration(elapsed)}"

    @staticmethod
    def _percent(consumed: int, total_size: int) -> float:
        if total_size <= 0:
            # Nothing to read means the pass is complete
            return 1.0
        return min(max(consumed / total_size, 0.0), 1.0)


class NullReporter:
    """Reporter that discards every emission."""

    def start(self):
        pass

    def finish(self):
        pass

    def __call__(self, consumed: int, total_size: Optional[int] = None, final: bool = False):
        pass
