import ipaddress
import logging
from typing import Iterable, Optional, Tuple

import numpy as np


logger = logging.getLogger(__name__)

KEY_BITS = 32
WORD_BITS = 64
WORD_COUNT = (1 << KEY_BITS) // WORD_BITS
COUNT_CHUNK_WORDS = 1 << 20


class AddressSet:
    """Direct-address bitmap with one bit for every 32-bit key (512 MiB)."""

    def __init__(self):
        self.capacity = 1 << KEY_BITS
        self.word_count = WORD_COUNT
        try:
            self.bitmap = np.zeros(self.word_count, dtype=np.uint64)
        except MemoryError:
            logger.error(f"Failed to allocate bitmap of {self.word_count} words")
            raise
        logger.debug(f"Allocated bitmap: {self.word_count} words, {self.bitmap.nbytes} bytes")

    def set(self, key: int):
        if not 0 <= key < self.capacity:
            raise ValueError(f"Key out of range: {key}")
        word_idx = key >> 6
        bit_idx = key & 63
        self.bitmap[word_idx] |= np.uint64(1 << bit_idx)

    def update(self, keys: Iterable[int]):
        """Mark many keys at once; same effect as calling set() on each."""
        keys = np.asarray(keys if isinstance(keys, np.ndarray) else list(keys), dtype=np.uint64)
        if keys.size == 0:
            return
        word_idx = (keys >> 6).astype(np.intp)
        masks = np.left_shift(np.uint64(1), keys & 63)
        # unbuffered, so repeated word indices all land
        np.bitwise_or.at(self.bitmap, word_idx, masks)

    def get(self, key: int) -> bool:
        if 0 <= key < self.capacity:
            return bool((int(self.bitmap[key >> 6]) >> (key & 63)) & 1)
        return False

    def count(self) -> int:
        total = 0
        for start in range(0, self.word_count, COUNT_CHUNK_WORDS):
            chunk = self.bitmap[start:start + COUNT_CHUNK_WORDS]
            total += int(np.bitwise_count(chunk).sum(dtype=np.uint64))
        return total

    def __contains__(self, key: int) -> bool:
        return self.get(key)

    def __len__(self) -> int:
        return self.count()


def parse_ipv4_key(text: str) -> Optional[int]:
    """
    Parse a whole line as an IP literal and return its 32-bit key.

    IPv6 syntax is understood, but only addresses with a 4-octet form
    (plain IPv4 or IPv4-mapped IPv6) produce a key. Anything else,
    including surrounding whitespace, yields None.
    """
    try:
        address = ipaddress.ip_address(text)
    except ValueError:
        return None

    if address.version == 6:
        if address.scope_id is not None:
            return None
        address = address.ipv4_mapped
        if address is None:
            return None

    return int(address)


def octets_to_key(a: int, b: int, c: int, d: int) -> int:
    for octet in (a, b, c, d):
        if not 0 <= octet <= 255:
            raise ValueError(f"Octet out of range: {octet}")
    return (a << 24) | (b << 16) | (c << 8) | d


def key_to_octets(key: int) -> Tuple[int, int, int, int]:
    if not 0 <= key < 1 << KEY_BITS:
        raise ValueError(f"Key out of range: {key}")
    return (key >> 24) & 0xFF, (key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF


def key_to_address(key: int) -> str:
    return ".".join(str(octet) for octet in key_to_octets(key))
