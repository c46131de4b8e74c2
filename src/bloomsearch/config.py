import enum
import numbers
from dataclasses import dataclass

from bloomsearch.algorithms.primes import next_prime
from bloomsearch.errors import InvalidConfiguration

# ln(2) truncated; k = ln(2) * M/N
HASH_COUNT_FACTOR = 0.69

SEARCH_BITS_PER_ELEMENT = 16

EXPERIMENT_BITS_PER_ELEMENT = 8
EXPERIMENT_TRIALS = 10
EXPERIMENT_WORDS = 5000
EXPERIMENT_OTHER_WORDS = 5000
EXPERIMENT_WORD_LENGTH = 20


class StrategyKind(enum.Enum):
    DETERMINISTIC = "deterministic"
    RANDOMIZED = "randomized"


def _check_positive(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfiguration(f"{name} must be positive, got {value}")
    return int(value)


@dataclass(frozen=True)
class FilterConfig:
    """Table length and hash count derived from expected set size.

    The two strategies size their tables differently. The deterministic one
    uses exactly ``bits_per_element * set_size`` bits. The randomized one needs
    a prime modulus, so it bumps the table to the next prime and recomputes the
    hash count against the bumped length; its ``bits_per_element`` is therefore
    a lower bound.

    Attributes:
        set_size (int): Expected number of elements (N).
        bits_per_element (int): Requested bits per element (M/N).
        table_length (int): Number of bits in the table (M).
        hash_count (int): Number of positions derived per key (k).
        strategy (StrategyKind): Hashing strategy this sizing is for.

    Example:
        >>> FilterConfig.for_strategy(StrategyKind.RANDOMIZED, 10, 8).table_length
        83
    """
    set_size: int
    bits_per_element: int
    table_length: int
    hash_count: int
    strategy: StrategyKind = StrategyKind.DETERMINISTIC

    @classmethod
    def for_strategy(cls, strategy: StrategyKind, set_size: int, bits_per_element: int) -> "FilterConfig":
        """Validate the inputs and derive the sizing for ``strategy``"""
        set_size = _check_positive("set_size", set_size)
        bits_per_element = _check_positive("bits_per_element", bits_per_element)
        strategy = StrategyKind(strategy)

        if strategy is StrategyKind.RANDOMIZED:
            table_length = next_prime(bits_per_element * set_size)
            hash_count = int(HASH_COUNT_FACTOR * (table_length // set_size + 1)) + 1
        else:
            table_length = bits_per_element * set_size
            hash_count = int(HASH_COUNT_FACTOR * bits_per_element) + 1

        return cls(set_size, bits_per_element, table_length, hash_count, strategy)

    @property
    def effective_bits_per_element(self) -> float:
        return self.table_length / self.set_size
