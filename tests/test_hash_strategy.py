import pytest
import numpy as np
from hypothesis import given, strategies as st

from bloomsearch.algorithms.fnv_hash import FNV_OFFSET_BASIS, fnv1a_32, to_int32, xor_mix
from bloomsearch.algorithms.hash_strategy import (
    DeterministicStrategy,
    RandomizedStrategy,
    make_strategy,
)
from bloomsearch.config import FilterConfig, StrategyKind
from bloomsearch.errors import InvalidConfiguration


class TestFnvHash:
    def test_known_values(self):
        assert fnv1a_32("") == FNV_OFFSET_BASIS
        assert fnv1a_32("a") == 0xe40c292c
        assert fnv1a_32("foobar") == 0xbf9cf968

    @given(st.text())
    def test_fits_32_bits(self, s):
        assert 0 <= fnv1a_32(s) < 2**32

    def test_to_int32(self):
        assert to_int32(0x7fffffff) == 2**31 - 1
        assert to_int32(0x80000000) == -2**31
        assert to_int32(0x811c9dc5) == -2128831035
        assert to_int32(-1) == -1
        assert to_int32(2**32 + 5) == 5

    def test_xor_mix(self):
        assert xor_mix("") == 0
        assert xor_mix("ab") == (97 ^ 98) * 2
        assert xor_mix("aa") == 0


class TestDeterministicStrategy:
    def test_known_positions(self):
        s = DeterministicStrategy(80, 6)
        assert s.positions("a")[:3] == [36, 8, 44]

    def test_empty_string(self):
        s = DeterministicStrategy(80, 6)
        # b is zero, so every position is the folded offset basis
        assert s.positions("") == [2128831035 % 80] * 6

    @given(st.text(), st.integers(1, 10**6), st.integers(1, 20))
    def test_positions_in_range(self, key, table_length, hash_count):
        positions = DeterministicStrategy(table_length, hash_count).positions(key)
        assert len(positions) == hash_count
        assert all(0 <= p < table_length for p in positions)

    def test_stable_across_instances(self):
        assert DeterministicStrategy(1000, 7).positions("bloom") == \
            DeterministicStrategy(1000, 7).positions("bloom")


class TestRandomizedStrategy:
    def test_rand_hash_is_order_sensitive(self):
        s = RandomizedStrategy(83, 7, coefficients=(1, 2, 5, 3))
        assert s.rand_hash("ab", 1, 2) == 6
        assert s.rand_hash("ba", 1, 2) == 4
        assert s.rand_hash("", 1, 2) == 0

    def test_double_hashing(self):
        s = RandomizedStrategy(83, 7, coefficients=(1, 2, 5, 3))
        first = s.rand_hash("bloom", 1, 2)
        second = s.rand_hash("bloom", 5, 3)
        assert s.positions("bloom") == [(first + second * i) % 83 for i in range(7)]

    @given(st.integers(0, 2**32 - 1))
    def test_coefficients_distinct(self, seed):
        s = RandomizedStrategy(2, 1, rng=np.random.default_rng(seed))
        a1, b1, a2, b2 = s.coefficients
        assert a1 != a2
        assert b1 != b2
        assert all(0 <= c < 2 for c in s.coefficients)

    def test_seed_reproduces_coefficients(self):
        c1 = RandomizedStrategy(40009, 7, rng=np.random.default_rng(2024)).coefficients
        c2 = RandomizedStrategy(40009, 7, rng=np.random.default_rng(2024)).coefficients
        assert c1 == c2

    @given(st.text(), st.integers(0, 2**32 - 1))
    def test_positions_in_range(self, key, seed):
        s = RandomizedStrategy(83, 7, rng=np.random.default_rng(seed))
        positions = s.positions(key)
        assert len(positions) == 7
        assert all(0 <= p < 83 for p in positions)

    @pytest.mark.parametrize("coefficients", [(1, 2, 1, 3), (1, 2, 4, 2), (1, 2, 83, 3), (-1, 2, 4, 3)])
    def test_rejects_bad_coefficients(self, coefficients):
        with pytest.raises(InvalidConfiguration):
            RandomizedStrategy(83, 7, coefficients=coefficients)


class TestMakeStrategy:
    def test_selects_by_kind(self):
        det = make_strategy(FilterConfig.for_strategy(StrategyKind.DETERMINISTIC, 10, 8))
        ran = make_strategy(FilterConfig.for_strategy(StrategyKind.RANDOMIZED, 10, 8),
                            np.random.default_rng(0))
        assert isinstance(det, DeterministicStrategy)
        assert isinstance(ran, RandomizedStrategy)
        assert (det.table_length, det.hash_count) == (80, 6)
        assert (ran.table_length, ran.hash_count) == (83, 7)
