import abc
import logging
from typing import List, Optional, Tuple

import numpy as np

from bloomsearch.algorithms.fnv_hash import fnv1a_32, to_int32, xor_mix
from bloomsearch.config import FilterConfig, StrategyKind
from bloomsearch.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class HashStrategy(abc.ABC):
    """Maps a key to ``hash_count`` positions in a table of ``table_length`` bits.

    Both implementations combine two base values with Kirsch-Mitzenmacher
    double hashing, ``h_i = h1 + i * h2``, so only two hashes are computed per
    key regardless of ``hash_count``.
    """

    def __init__(self, table_length: int, hash_count: int):
        self.table_length = table_length
        self.hash_count = hash_count

    @abc.abstractmethod
    def positions(self, key: str) -> List[int]:
        """Table indices for an already normalized key"""

    @staticmethod
    def _reduce(raw: int, m: int) -> int:
        # remainder takes the sign of the dividend, then gets negated
        return abs(raw) % m


class DeterministicStrategy(HashStrategy):
    """Content hash: FNV base value with an XOR-mix stride.

    ``a`` is the FNV hash of the key read as a signed 32-bit value and
    ``b = a * xor_mix(key)``. Every product and sum wraps at 32 bits, so the
    positions are stable across runs, processes and platforms.
    """

    def positions(self, key: str) -> List[int]:
        a = to_int32(fnv1a_32(key))
        b = to_int32(a * xor_mix(key))
        m = self.table_length
        return [self._reduce(to_int32(a + b * i), m) for i in range(self.hash_count)]


class RandomizedStrategy(HashStrategy):
    """Universal hash family over a prime-sized table.

    Two rolling hashes ``acc = (a + b * (acc ^ c)) mod p`` with independently
    sampled coefficients provide the base values. The coefficients are drawn
    once from ``[0, table_length)`` using the supplied generator, resampling
    until ``a1 != a2`` and ``b1 != b2``.

    Attributes:
        coefficients (tuple): ``(a1, b1, a2, b2)``.

    Example:
        >>> s = RandomizedStrategy(83, 7, rng=np.random.default_rng(42))
        >>> len(s.positions("bloom"))
        7
    """

    def __init__(self, table_length: int, hash_count: int,
                 rng: Optional[np.random.Generator] = None,
                 coefficients: Optional[Tuple[int, int, int, int]] = None):
        super().__init__(table_length, hash_count)
        if coefficients is None:
            if table_length < 2:
                raise InvalidConfiguration("randomized strategy needs a table of at least 2 bits")
            rng = rng if rng is not None else np.random.default_rng()
            a1, a2 = self._sample_distinct(rng, table_length)
            b1, b2 = self._sample_distinct(rng, table_length)
        else:
            a1, b1, a2, b2 = (int(c) for c in coefficients)
            if a1 == a2 or b1 == b2:
                raise InvalidConfiguration("coefficients must satisfy a1 != a2 and b1 != b2")
            if not all(0 <= c < table_length for c in (a1, b1, a2, b2)):
                raise InvalidConfiguration(f"coefficients must lie in [0, {table_length})")
        self.coefficients = (a1, b1, a2, b2)
        logger.debug("randomized strategy: table_length=%d coefficients=%s",
                     table_length, self.coefficients)

    @staticmethod
    def _sample_distinct(rng: np.random.Generator, m: int) -> Tuple[int, int]:
        x = y = 0
        while x == y:
            x, y = (int(v) for v in rng.integers(0, m, size=2))
        return x, y

    def rand_hash(self, key: str, a: int, b: int) -> int:
        """Order-sensitive affine rolling hash modulo the table length"""
        acc = 0
        for c in key:
            acc ^= ord(c)
            acc = (a + b * acc) % self.table_length
        return acc

    def positions(self, key: str) -> List[int]:
        a1, b1, a2, b2 = self.coefficients
        first = self.rand_hash(key, a1, b1)
        second = self.rand_hash(key, a2, b2)
        m = self.table_length
        return [self._reduce(first + second * i, m) for i in range(self.hash_count)]


def make_strategy(config: FilterConfig, rng: Optional[np.random.Generator] = None) -> HashStrategy:
    """Build the strategy ``config`` was sized for"""
    if config.strategy is StrategyKind.RANDOMIZED:
        return RandomizedStrategy(config.table_length, config.hash_count, rng=rng)
    return DeterministicStrategy(config.table_length, config.hash_count)
