from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ScanState:
    """Per-run counters owned by the scan loop."""
    start: float
    total_size: Optional[int] = None
    consumed: int = 0
    last_emitted: int = 0

    # Line tallies
    lines: int = 0
    accepted: int = 0
    skipped: int = 0

    def should_emit(self, interval: int) -> bool:
        return self.consumed - self.last_emitted > interval


@dataclass
class ScanResult:
    """Outcome of one full pass over a source."""
    unique: int
    lines: int
    accepted: int
    skipped: int
    bytes_consumed: int
    total_size: Optional[int]
    elapsed: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unique": self.unique,
            "lines": self.lines,
            "accepted": self.accepted,
            "skipped": self.skipped,
            "bytes_consumed": self.bytes_consumed,
            "total_size": self.total_size,
            "elapsed": self.elapsed
        }
