import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

import numpy as np

from bloomsearch.config import SEARCH_BITS_PER_ELEMENT, StrategyKind
from bloomsearch.data_structures.bloom_filter import BloomFilter
from bloomsearch.errors import UninitializedQuery

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset([
    "are", "with", "the", "can", "has",
    "had", "let", "like", "that", "for", "and",
])

_NON_WORD = re.compile(r"[^a-zA-Z0-9 ]")


def tokenize(text: str) -> List[str]:
    """Lower-cased words longer than two characters, stop words removed"""
    words = _NON_WORD.sub(" ", text).lower().split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS]


def vocabulary(path: Union[str, Path]) -> Set[str]:
    """Unique tokens of a text file"""
    words = set()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            words.update(tokenize(line))
    return words


class DocumentFilter:
    """Bloom filter over the vocabulary of one text document.

    The filter is sized from the number of unique words in the file, so the
    file is read once at construction and again by ``add_document``. Queries
    are rejected until the words have been added.

    Example:
        >>> doc = DocumentFilter("notes/bloom.txt")
        >>> doc.add_document()
        >>> doc.appears_any(["filter", "hash"])
        True
    """
    def __init__(self, path: Union[str, Path], bits_per_word: int = SEARCH_BITS_PER_ELEMENT,
                 strategy: StrategyKind = StrategyKind.DETERMINISTIC,
                 rng: Optional[np.random.Generator] = None):
        self.path = Path(path)
        unique = len(vocabulary(self.path))
        # empty documents still get a one-element filter
        self.filter = BloomFilter(max(unique, 1), bits_per_word, strategy, rng)
        self._added = False
        logger.debug("%s: %d unique words, %d bits", self.path.name, unique, self.filter.size())

    @property
    def name(self) -> str:
        return self.path.name

    def add_document(self):
        """Insert every unique word of the document"""
        self.filter.update(vocabulary(self.path))
        self._added = True

    def _require_added(self):
        if not self._added:
            raise UninitializedQuery(f"add_document() must run before querying {self.name}")

    def appears(self, term: str) -> bool:
        self._require_added()
        return self.filter.query(term)

    def appears_any(self, terms: Iterable[str]) -> bool:
        """True if the document might contain at least one of ``terms``"""
        return any(self.appears(t) for t in terms)

    def filter_size(self) -> int:
        return self.filter.size()

    def hash_count(self) -> int:
        return self.filter.hash_count()

    def data_size(self) -> int:
        self._require_added()
        return self.filter.count()
