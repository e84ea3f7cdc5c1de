import logging
import os
import stat
import sys
import time
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, List, Optional, Union

from .base import ScanResult, ScanState
from .progress import NullReporter
from .utils import AddressSet, parse_ipv4_key


logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 10 * 1024 * 1024
BATCH_SIZE = 65536

# Called as reporter(consumed, total_size, final=False); optional start() and finish()
Reporter = Callable[..., None]


def strip_terminator(raw: bytes) -> bytes:
    """Drop a trailing newline and then one carriage return, if present."""
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


def decode_line(line: bytes) -> Optional[str]:
    try:
        return line.decode("ascii")
    except UnicodeDecodeError:
        return None


class ScanPipeline:
    """Single pass over a line source, marking every IPv4 key in an AddressSet."""

    def __init__(self, address_set: AddressSet, reporter: Optional[Reporter] = None,
                 progress_interval: int = PROGRESS_INTERVAL, batch_size: int = BATCH_SIZE):
        if progress_interval <= 0:
            raise ValueError(f"Progress interval must be positive, got {progress_interval}")
        if batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got {batch_size}")

        self.address_set = address_set
        self.reporter = reporter if reporter is not None else NullReporter()
        self.progress_interval = progress_interval
        self.batch_size = batch_size

    def scan(self, source: Iterable[bytes], total_size: Optional[int] = None) -> ScanResult:
        """
        Consume every line of ``source`` and return the final tally.

        Read errors raised by the source are logged and re-raised; no
        partial result is produced in that case.
        """
        state = ScanState(start=time.monotonic(), total_size=total_size)
        pending: List[int] = []
        start = getattr(self.reporter, "start", None)
        if start is not None:
            start()

        try:
            for raw in source:
                line = strip_terminator(raw)
                state.lines += 1
                state.consumed += len(line) + 1

                text = decode_line(line)
                key = parse_ipv4_key(text) if text is not None else None
                if key is not None:
                    pending.append(key)
                    state.accepted += 1
                    if len(pending) >= self.batch_size:
                        self._flush(pending)
                else:
                    state.skipped += 1

                if state.should_emit(self.progress_interval):
                    self._flush(pending)
                    self.reporter(state.consumed, state.total_size)
                    state.last_emitted = state.consumed
        except OSError as e:
            logger.error(f"Read failed after {state.consumed} bytes: {e}")
            finish = getattr(self.reporter, "finish", None)
            if finish is not None:
                finish()
            raise

        self._flush(pending)
        self._emit_final(state)

        result = ScanResult(
            unique=self.address_set.count(),
            lines=state.lines,
            accepted=state.accepted,
            skipped=state.skipped,
            bytes_consumed=state.consumed,
            total_size=state.total_size,
            elapsed=time.monotonic() - state.start
        )
        logger.debug(f"Scan finished: {result.to_dict()}")
        return result

    def scan_file(self, path: Union[str, Path]) -> ScanResult:
        """Scan a file by path; ``-`` reads standard input."""
        if str(path) == "-":
            return self.scan(sys.stdin.buffer)

        try:
            handle = open(path, "rb")
        except OSError as e:
            logger.error(f"Failed to open {path}: {e}")
            raise

        with handle:
            return self.scan(handle, source_size(handle))

    def _flush(self, pending: List[int]):
        if pending:
            self.address_set.update(pending)
            pending.clear()

    def _emit_final(self, state: ScanState):
        if state.total_size is None:
            self.reporter(state.consumed, None, final=True)
        else:
            # Report completion even if the file grew while being read
            done = max(state.total_size, state.consumed)
            self.reporter(done, done, final=True)


def source_size(handle: BinaryIO) -> Optional[int]:
    """Size of a regular file behind ``handle``, or None for pipes and devices."""
    try:
        info = os.fstat(handle.fileno())
    except (AttributeError, OSError):
        return None
    if not stat.S_ISREG(info.st_mode):
        return None
    return info.st_size
