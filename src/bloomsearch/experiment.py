"""Monte Carlo estimate of a Bloom filter's false positive rate.

Each trial inserts a batch of distinct random strings into a fresh filter,
queries a second batch that shares no string with the first, and counts the
hits. The per-trial results come back as an Arrow table.

    bloom-fp-experiment --strategy randomized --bits-per-element 8 --trials 10
"""

import argparse
import logging
import re
from dataclasses import asdict, dataclass
from typing import Collection, List, Optional, Sequence

import numpy as np
import pyarrow as pa
import pyarrow.compute as pc

from bloomsearch.config import (
    EXPERIMENT_BITS_PER_ELEMENT,
    EXPERIMENT_OTHER_WORDS,
    EXPERIMENT_TRIALS,
    EXPERIMENT_WORD_LENGTH,
    EXPERIMENT_WORDS,
    StrategyKind,
)
from bloomsearch.data_structures.bloom_filter import BloomFilter
from bloomsearch.search import configure_logging

logger = logging.getLogger(__name__)

MIN_CHAR = 48   # '0'
MAX_CHAR = 122  # 'z'
ALPHABET_SIZE = 62  # [0-9A-Za-z] survive the punctuation strip

_NON_WORD = re.compile(r"[^a-zA-Z0-9 ]")


@dataclass
class TrialResult:
    inserted: int
    queried: int
    false_positives: int
    rate: float
    theoretical_rate: float
    table_length: int
    hash_count: int


def random_word(rng: np.random.Generator, length: int) -> str:
    """Random string over code points 48..122 with punctuation stripped"""
    codes = rng.integers(MIN_CHAR, MAX_CHAR + 1, size=length)
    return _NON_WORD.sub("", "".join(map(chr, codes)))


def word_capacity(length: int) -> int:
    """Number of distinct words ``random_word`` can produce for ``length``"""
    return sum(ALPHABET_SIZE ** j for j in range(length + 1))


def _reachable(word: str, length: int) -> bool:
    return len(word) <= length and (word == "" or (word.isascii() and word.isalnum()))


def random_words(rng: np.random.Generator, count: int, length: int,
                 exclude: Collection[str] = ()) -> List[str]:
    """``count`` distinct random words, none of them in ``exclude``

    Raises ValueError when ``length`` cannot yield that many distinct words.
    """
    seen = set(exclude)
    taken = sum(1 for w in seen if _reachable(w, length))
    if count + taken > word_capacity(length):
        raise ValueError(f"cannot draw {count} distinct words of length {length} "
                         f"with {taken} excluded")
    words = []
    while len(words) < count:
        w = random_word(rng, length)
        if w in seen:
            continue
        seen.add(w)
        words.append(w)
    return words


def run_trial(rng: np.random.Generator,
              strategy: StrategyKind = StrategyKind.DETERMINISTIC,
              bits_per_element: int = EXPERIMENT_BITS_PER_ELEMENT,
              words: int = EXPERIMENT_WORDS,
              other_words: int = EXPERIMENT_OTHER_WORDS,
              length: int = EXPERIMENT_WORD_LENGTH) -> TrialResult:
    bf = BloomFilter(words, bits_per_element, strategy, rng)
    added = random_words(rng, words, length)
    bf.update(added)

    probes = random_words(rng, other_words, length, exclude=added)
    fp = sum(1 for w in probes if w in bf)

    return TrialResult(
        inserted=bf.count(),
        queried=len(probes),
        false_positives=fp,
        rate=fp / len(probes) if probes else 0.0,
        theoretical_rate=bf.false_positive_rate(),
        table_length=bf.size(),
        hash_count=bf.hash_count(),
    )


def run_experiment(trials: int = EXPERIMENT_TRIALS,
                   strategy: StrategyKind = StrategyKind.DETERMINISTIC,
                   bits_per_element: int = EXPERIMENT_BITS_PER_ELEMENT,
                   words: int = EXPERIMENT_WORDS,
                   other_words: int = EXPERIMENT_OTHER_WORDS,
                   length: int = EXPERIMENT_WORD_LENGTH,
                   rng: Optional[np.random.Generator] = None) -> pa.Table:
    """Run ``trials`` independent trials
    Returns:
    Arrow Table with one row per trial: trial, inserted, queried,
    false_positives, rate, theoretical_rate, table_length, hash_count
    """
    rng = rng if rng is not None else np.random.default_rng()
    rows = []
    for i in range(trials):
        result = run_trial(rng, strategy, bits_per_element, words, other_words, length)
        logger.info("trial %d: %d/%d false positives (rate %.5f, theoretical %.5f)",
                    i, result.false_positives, result.queried,
                    result.rate, result.theoretical_rate)
        rows.append({"trial": i, **asdict(result)})
    return pa.Table.from_pylist(rows)


def summarize(table: pa.Table) -> dict:
    """Mean empirical and theoretical rates over all trials"""
    return {
        "trials": table.num_rows,
        "rate": pc.mean(table["rate"]).as_py(),
        "theoretical_rate": pc.mean(table["theoretical_rate"]).as_py(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bloom-fp-experiment",
                                     description=__doc__.splitlines()[0])
    parser.add_argument("--strategy", choices=[k.value for k in StrategyKind],
                        default=StrategyKind.RANDOMIZED.value)
    parser.add_argument("--bits-per-element", type=int, default=EXPERIMENT_BITS_PER_ELEMENT)
    parser.add_argument("--trials", type=int, default=EXPERIMENT_TRIALS)
    parser.add_argument("--words", type=int, default=EXPERIMENT_WORDS,
                        help="words inserted per trial (default: %(default)s)")
    parser.add_argument("--other-words", type=int, default=EXPERIMENT_OTHER_WORDS,
                        help="non-inserted words queried per trial (default: %(default)s)")
    parser.add_argument("--length", type=int, default=EXPERIMENT_WORD_LENGTH,
                        help="generated word length before punctuation is stripped")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    for flag in ("bits_per_element", "trials", "words", "other_words", "length"):
        if getattr(args, flag) <= 0:
            parser.error(f"--{flag.replace('_', '-')} must be positive")

    try:
        table = run_experiment(args.trials, StrategyKind(args.strategy), args.bits_per_element,
                               args.words, args.other_words, args.length,
                               np.random.default_rng(args.seed))
    except ValueError as e:
        parser.error(str(e))
    summary = summarize(table)
    print(f"The average false positive rate is: {summary['rate']} for a "
          f"{args.strategy} bloom filter, with {args.bits_per_element} bits.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
