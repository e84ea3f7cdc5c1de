import argparse
import logging
import sys
from typing import List, Optional

from . import count_unique_ips
from .progress import MIB, NullReporter, ProgressReporter


logger = logging.getLogger(__name__)

USAGE = "Usage: unique-ips <filename>"


def positive_mib(value: str) -> int:
    try:
        size = int(float(value) * MIB)
    except (ValueError, OverflowError):
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}")
    if size <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive: {value!r}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unique-ips",
        description="Count distinct IPv4 addresses in a line-oriented file."
    )
    parser.add_argument("filename", nargs="?", help="input file, or - for standard input")
    parser.add_argument("-q", "--quiet", action="store_true", help="do not draw progress")
    parser.add_argument("--interval", type=positive_mib, default=10 * MIB, metavar="MIB",
                        help="MiB consumed between progress redraws (default: 10)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.filename is None:
        print(USAGE)
        return 0

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    reporter = NullReporter() if args.quiet else ProgressReporter()
    try:
        result = count_unique_ips(args.filename, reporter=reporter, progress_interval=args.interval)
    except (OSError, MemoryError):
        # Already logged where it happened
        return 1

    logger.info(f"Scanned {result.lines} lines, skipped {result.skipped}")
    print(f"Unique IPs: {result.unique}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
