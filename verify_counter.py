import random
import tempfile
from pathlib import Path

from unique_ips import ProgressReporter, count_unique_ips, key_to_address


# Configuration
SAMPLE_LINES = 200_000
DISTINCT_KEYS = 50_000
GARBAGE_RATIO = 0.05
SEED = 42


def write_sample(path: Path, rng: random.Random) -> int:
    keys = rng.sample(range(1 << 32), DISTINCT_KEYS)
    garbage = ["", "not-an-ip", "::1", "999.999.999.999", " 10.0.0.1", "2001:db8::1"]

    with open(path, "w", encoding="ascii", newline="\n") as f:
        # Every key at least once, then random repeats
        for key in keys:
            f.write(key_to_address(key) + "\n")
        for _ in range(SAMPLE_LINES - DISTINCT_KEYS):
            if rng.random() < GARBAGE_RATIO:
                f.write(rng.choice(garbage) + "\n")
            else:
                f.write(key_to_address(rng.choice(keys)) + "\n")
    return len(keys)


def verify():
    rng = random.Random(SEED)
    with tempfile.TemporaryDirectory() as tmp:
        sample = Path(tmp) / "sample.txt"
        print(f"Writing {SAMPLE_LINES} lines to {sample}...")
        expected = write_sample(sample, rng)

        print("Counting...")
        result = count_unique_ips(sample, reporter=ProgressReporter(), progress_interval=256 * 1024)

    print(f"Unique IPs: {result.unique} (expected {expected})")
    print(f"Lines: {result.lines}, skipped: {result.skipped}, elapsed: {result.elapsed:.2f}s")
    if result.unique != expected:
        raise SystemExit("Mismatch between bitmap count and generated keys")


if __name__ == "__main__":
    verify()
