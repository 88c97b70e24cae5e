"""CSPRNG wrapper with a mixing entropy pool.

Every draw mixes the pool and folds a fresh byte from the underlying source
into it, so no two draws observe the same pool state. The pool only hardens
output against a weak platform source; it adds no guarantee on top of a
sound one.

The source is any object with ``random.Random``'s ``getrandbits`` and
``randrange``. It defaults to ``random.SystemRandom`` (``os.urandom``);
passing a seeded ``random.Random`` gives a reproducible generator for tests
and simulations, which must never be used for real secrets.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import MutableSequence
from typing import Protocol, TypeVar

import numpy as np

from shamir256.errors import InvalidArgument

logger = logging.getLogger(__name__)

POOL_SIZE = 256
DOUBLE_PRECISION_BITS = 53

T = TypeVar("T")


class ByteSource(Protocol):
    def getrandbits(self, k: int) -> int: ...

    def randrange(self, stop: int) -> int: ...


class SecureRandom:
    """Pool-mixed random generator. Safe to share between threads.

    Args:
        source: Underlying randomness source. Defaults to the OS CSPRNG.
        pool_size: Number of bytes in the entropy pool.
    """

    _default: SecureRandom | None = None
    _default_lock = threading.Lock()

    def __init__(
        self,
        source: ByteSource | None = None,
        pool_size: int = POOL_SIZE,
    ) -> None:
        if pool_size < 1:
            raise InvalidArgument(f"pool_size must be positive, got {pool_size}")
        self._source: ByteSource = source if source is not None else random.SystemRandom()
        self._lock = threading.Lock()
        self._pool = np.zeros(pool_size, dtype=np.uint8)
        self._cursor = 0
        self._fill_pool()

    @classmethod
    def default(cls) -> SecureRandom:
        """Process-wide instance backed by the OS CSPRNG, created on first use."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls()
            return cls._default

    @classmethod
    def seeded(cls, seed: int) -> SecureRandom:
        """Deterministic generator for tests and simulations."""
        return cls(source=random.Random(seed))

    @property
    def pool_size(self) -> int:
        return int(self._pool.size)

    def pool_snapshot(self) -> bytes:
        """Copy of the current pool contents."""
        with self._lock:
            return self._pool.tobytes()

    def _fill_pool(self) -> None:
        self._pool = np.array(
            [self._source.getrandbits(8) for _ in range(self._pool.size)],
            dtype=np.uint8,
        )
        self._cursor = 0

    def _mix(self) -> None:
        """Rotate the pool, chain each byte to its neighbour, fold in a fresh byte.

        Chaining is a running XOR carry (prefix XOR), which is a bijection on
        the pool, so mixing alone never loses pool entropy.
        """
        self._pool = np.bitwise_xor.accumulate(np.roll(self._pool, 1))
        self._pool[self._cursor] ^= np.uint8(self._source.getrandbits(8))
        self._cursor = (self._cursor + 1) % self._pool.size

    def next_byte(self) -> int:
        with self._lock:
            self._mix()
            return self._source.getrandbits(8) ^ int(self._pool[self._cursor])

    def next_int(self, max: int) -> int:
        """Uniform int in [0, max)."""
        if max <= 0:
            raise InvalidArgument(f"max must be positive, got {max}")
        if max <= 256:
            # reject the top partial block of byte values to avoid modulo bias
            limit = 256 - (256 % max)
            while True:
                value = self.next_byte()
                if value < limit:
                    return value % max
        with self._lock:
            self._mix()
            return self._source.randrange(max)

    def next_bytes(self, length: int) -> bytes:
        if length <= 0:
            raise InvalidArgument(f"length must be positive, got {length}")
        return bytes(self.next_byte() for _ in range(length))

    def next_big_integer(self, bit_length: int) -> int:
        """Uniform non-negative int with at most bit_length bits."""
        if bit_length <= 0:
            raise InvalidArgument(f"bit_length must be positive, got {bit_length}")
        byte_length = (bit_length + 7) // 8
        raw = bytearray(self.next_bytes(byte_length))
        excess = byte_length * 8 - bit_length
        if excess:
            raw[0] &= (1 << (8 - excess)) - 1
        return int.from_bytes(raw, byteorder="big")

    def next_double(self) -> float:
        """Uniform float in [0.0, 1.0) with 53 bits of precision."""
        return self.next_big_integer(DOUBLE_PRECISION_BITS) / (1 << DOUBLE_PRECISION_BITS)

    def next_bool(self) -> bool:
        return self.next_byte() >= 128

    def next_gf256_element(self) -> int:
        return self.next_byte()

    def next_gf256_elements(self, count: int) -> list[int]:
        return [self.next_gf256_element() for _ in range(count)]

    def next_nonzero_gf256_element(self) -> int:
        while True:
            value = self.next_byte()
            if value:
                return value

    def unique_integers(self, count: int, max: int) -> list[int]:
        """count distinct ints from [0, max), sorted ascending."""
        if count > max:
            raise InvalidArgument(
                f"Cannot draw {count} distinct values from range of size {max}"
            )
        values: set[int] = set()
        while len(values) < count:
            values.add(self.next_int(max))
        return sorted(values)

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(i + 1)
            items[i], items[j] = items[j], items[i]

    def secure_clear(self) -> None:
        """Zero the pool and reset the cursor.

        Best effort only: the underlying source keeps its own state and
        earlier pool arrays may survive in freed memory.
        """
        with self._lock:
            self._pool[:] = 0
            self._cursor = 0
        logger.debug("Entropy pool cleared (%d bytes)", self._pool.size)

    def reseed(self) -> None:
        """Refill the pool from the underlying source."""
        with self._lock:
            self._fill_pool()
        logger.debug("Entropy pool reseeded (%d bytes)", self._pool.size)
