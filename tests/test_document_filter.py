import pytest
import numpy as np

from bloomsearch.config import StrategyKind
from bloomsearch.document_filter import DocumentFilter, tokenize, vocabulary
from bloomsearch.errors import UninitializedQuery

TEXT = """The Bloom filter, with its bit array, can answer membership queries.
Hashing: FNV and universal families -- and the ARRAY again!
"""


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "bloom.txt"
    path.write_text(TEXT, encoding="utf-8")
    return path


class TestTokenize:
    def test_filters_short_and_stop_words(self):
        assert tokenize("The cat and a dog, like THAT owl!") == ["cat", "dog", "owl"]

    def test_punctuation_splits_words(self):
        assert tokenize("bit-array/hash_table") == ["bit", "array", "hash", "table"]

    def test_vocabulary_is_deduplicated(self, document):
        words = vocabulary(document)
        assert "array" in words
        assert "the" not in words
        assert "fnv" in words
        assert len(words) == len(set(tokenize(TEXT)))


class TestDocumentFilter:
    def test_query_before_add_raises(self, document):
        doc = DocumentFilter(document)
        with pytest.raises(UninitializedQuery):
            doc.appears("bloom")
        with pytest.raises(UninitializedQuery):
            doc.data_size()

    @pytest.mark.parametrize("kind", [StrategyKind.DETERMINISTIC, StrategyKind.RANDOMIZED])
    def test_finds_every_word(self, document, kind):
        doc = DocumentFilter(document, 16, kind, np.random.default_rng(11))
        doc.add_document()
        for word in vocabulary(document):
            assert doc.appears(word)
        assert doc.appears("BLOOM")
        assert doc.appears_any(["nothing-here", "membership"])

    def test_sizing(self, document):
        doc = DocumentFilter(document, bits_per_word=16)
        unique = len(vocabulary(document))
        assert doc.name == "bloom.txt"
        assert doc.filter_size() == 16 * unique
        assert doc.hash_count() == 12
        doc.add_document()
        assert doc.data_size() == unique

    def test_empty_document(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("a an to of\n", encoding="utf-8")
        doc = DocumentFilter(path, bits_per_word=8)
        doc.add_document()
        assert doc.filter_size() == 8
        assert doc.data_size() == 0
        assert not doc.appears("anything")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DocumentFilter(tmp_path / "nope.txt")
