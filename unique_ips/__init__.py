from pathlib import Path
from typing import Optional, Union

from .base import ScanResult, ScanState
from .engine import PROGRESS_INTERVAL, ScanPipeline
from .progress import NullReporter, ProgressReporter
from .utils import AddressSet, key_to_address, key_to_octets, octets_to_key, parse_ipv4_key


__all__ = [
    "AddressSet",
    "ScanPipeline",
    "ScanResult",
    "ScanState",
    "ProgressReporter",
    "NullReporter",
    "parse_ipv4_key",
    "octets_to_key",
    "key_to_octets",
    "key_to_address",
    "count_unique_ips"
]

__version__ = "1.0.0"


def count_unique_ips(path: Union[str, Path], reporter=None,
                     progress_interval: int = PROGRESS_INTERVAL,
                     address_set: Optional[AddressSet] = None) -> ScanResult:
    """
    Factory function to count distinct IPv4 addresses in a file.

    Args:
        path: File to scan, or "-" for standard input.
        reporter: Progress callable taking (consumed, total_size, final=False);
                  start() and finish() are used when it has them. Silent if omitted.
        progress_interval: Bytes consumed between progress redraws.
        address_set: Optional existing bitmap. A fresh 512 MiB one is
                     allocated if not provided.
    """
    if address_set is None:
        address_set = AddressSet()

    pipeline = ScanPipeline(address_set, reporter=reporter, progress_interval=progress_interval)
    return pipeline.scan_file(path)
