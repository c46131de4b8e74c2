import logging
import math
from typing import Iterable, Optional

import numpy as np

from bloomsearch.algorithms.hash_strategy import HashStrategy, make_strategy
from bloomsearch.config import FilterConfig, StrategyKind
from bloomsearch.data_structures.bit_table import BitTable

logger = logging.getLogger(__name__)


class BloomFilter:
    """A space-efficient probabilistic data structure for membership testing.

    Bloom filters are used to test whether an element is a member of a set.
    They are probabilistic in nature, meaning there is a small chance of false positives
    (indicating an element is present when it's not), but no false negatives
    (indicating an element is not present when it is).

    Keys are lower-cased before hashing, so membership is case-insensitive. The
    table is sized from the expected set size and the bits to spend per
    element; the hashing strategy decides the exact sizing (see ``FilterConfig``).
    There is no removal: once set, a bit stays set.

    Attributes:
        config (FilterConfig): Derived table length and hash count.
        strategy (HashStrategy): Position generator bound to the table length.
        bits (BitTable): The bit array, exactly ``config.table_length`` bits.

    Example:
        >>> bf = BloomFilter(set_size=1000, bits_per_element=8)
        >>> bf.insert("hello")
        >>> bf.query("Hello")
        True
        >>> "world" in bf
        False  # Potentially, with a small probability of being True (false positive)

    """
    def __init__(self, set_size: int, bits_per_element: int,
                 strategy: StrategyKind = StrategyKind.DETERMINISTIC,
                 rng: Optional[np.random.Generator] = None):
        self.config = FilterConfig.for_strategy(strategy, set_size, bits_per_element)
        self.strategy: HashStrategy = make_strategy(self.config, rng)
        self.bits = BitTable(self.config.table_length)
        self._element_count = 0
        logger.debug("bloom filter created: strategy=%s set_size=%d table_length=%d hash_count=%d",
                     self.config.strategy.value, self.config.set_size,
                     self.config.table_length, self.config.hash_count)

    @staticmethod
    def _normalize(key: str) -> str:
        return key.lower()

    def insert(self, key: str):
        """Insert key into filter"""
        for idx in self.strategy.positions(self._normalize(key)):
            self.bits.set(idx)
        self._element_count += 1

    def update(self, keys: Iterable[str]):
        for key in keys:
            self.insert(key)

    def query(self, key: str) -> bool:
        """Check key membership; False means definitely absent"""
        for idx in self.strategy.positions(self._normalize(key)):
            if not self.bits.get(idx):
                return False
        return True

    def __contains__(self, key: str) -> bool:
        return self.query(key)

    def size(self) -> int:
        return self.config.table_length

    def count(self) -> int:
        """Number of insert calls so far, duplicates included"""
        return self._element_count

    def hash_count(self) -> int:
        return self.config.hash_count

    def fill_ratio(self) -> float:
        return self.bits.popcount() / self.config.table_length

    def false_positive_rate(self, n: Optional[int] = None) -> float:
        """Theoretical false positive rate: (1 - e^(-kn/m))^k"""
        n = self._element_count if n is None else n
        if n <= 0:
            return 0.0
        k = self.config.hash_count
        m = self.config.table_length
        return (1 - math.exp(-k * n / m)) ** k


def new_filter(set_size: int, bits_per_element: int,
               strategy: StrategyKind = StrategyKind.DETERMINISTIC,
               rng: Optional[np.random.Generator] = None) -> BloomFilter:
    """Construct a filter; raises InvalidConfiguration on non-positive sizes"""
    return BloomFilter(set_size, bits_per_element, strategy, rng)
