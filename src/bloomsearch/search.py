"""Approximate full-text search over a directory using one Bloom filter per file.

    bloom-search DIRECTORY TERM [TERM ...]
    bloom-search docs/ bloom hash --strategy randomized --seed 7 -v
"""

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from bloomsearch.config import SEARCH_BITS_PER_ELEMENT, StrategyKind
from bloomsearch.document_filter import DocumentFilter

logger = logging.getLogger(__name__)


def index_directory(directory: Union[str, Path], bits_per_word: int = SEARCH_BITS_PER_ELEMENT,
                    strategy: StrategyKind = StrategyKind.DETERMINISTIC,
                    rng: Optional[np.random.Generator] = None) -> List[DocumentFilter]:
    """Build and fill a DocumentFilter for every regular file in ``directory``"""
    filters = []
    for path in sorted(Path(directory).iterdir()):
        if not path.is_file():
            continue
        try:
            doc = DocumentFilter(path, bits_per_word, strategy, rng)
            doc.add_document()
        except OSError as e:
            logger.warning("skipping %s: %s", path, e)
            continue
        filters.append(doc)
    logger.info("indexed %d documents from %s", len(filters), directory)
    return filters


def search(filters: Iterable[DocumentFilter], terms: Sequence[str]) -> List[str]:
    """Names of documents that might contain at least one term"""
    return [f.name for f in filters if f.appears_any(terms)]


def total_bits(filters: Iterable[DocumentFilter]) -> int:
    return sum(f.filter_size() for f in filters)


def configure_logging(verbosity: int):
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bloom-search", description=__doc__.splitlines()[0])
    parser.add_argument("directory", type=Path, help="directory of text files to index")
    parser.add_argument("terms", nargs="+", help="search terms")
    parser.add_argument("--bits-per-element", type=int, default=SEARCH_BITS_PER_ELEMENT,
                        help="bits per unique word (default: %(default)s)")
    parser.add_argument("--strategy", choices=[k.value for k in StrategyKind],
                        default=StrategyKind.DETERMINISTIC.value)
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the randomized strategy")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.directory.is_dir():
        parser.error(f"not a directory: {args.directory}")
    if args.bits_per_element <= 0:
        parser.error("--bits-per-element must be positive")

    filters = index_directory(args.directory, args.bits_per_element,
                              StrategyKind(args.strategy), np.random.default_rng(args.seed))
    print(search(filters, args.terms))
    print(f"Total number of bits used: {total_bits(filters)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
