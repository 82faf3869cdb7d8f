"""
tests/test_sparse_table.py
==========================
Pytest test suite for the sparse-table range minimum query.

Reference sequences
-------------------
  small      [5, 2, 8]
      query(0, 2) = 1, query(0, 1) = 1, query(1, 2) = 1

  plateau    [3, 1, 1, 2, 1, 0, 0, 4, 0, 1]
      Duplicate-heavy; every minimum is tied, so only a strictly leftmost
      tie-break gives the expected answers.

  pair       [7, 7]   and   [9, 4]
      n == 2 boundary: level 1 must exist so that query(0, 1) is answerable.

Every range of every reference sequence is checked against a brute-force
leftmost argmin.
"""

import os
import sys
from fractions import Fraction

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from lcarmq._sparse_table import (
    SparseTable,
    build_flat_sparse_table,
    build_sparse_table,
    query_flat_sparse_table,
    query_sparse_table,
    translate_sparse_table,
)


# ======================================================================== #
# Helper                                                                    #
# ======================================================================== #


def leftmost_argmin(values, i, j):
    """Smallest index k in [i, j] with values[k] minimal (pure Python)."""
    best = i
    for k in range(i + 1, j + 1):
        if values[k] < values[best]:
            best = k
    return best


def all_ranges(n):
    return [(i, j) for i in range(n) for j in range(i, n)]


# ======================================================================== #
# Fixtures                                                                  #
# ======================================================================== #


@pytest.fixture(scope="module")
def small():
    return build_sparse_table([5, 2, 8])


PLATEAU = [3, 1, 1, 2, 1, 0, 0, 4, 0, 1]


@pytest.fixture(scope="module")
def plateau():
    return build_sparse_table(PLATEAU)


# ======================================================================== #
# 1. Small reference scenario                                               #
# ======================================================================== #


class TestSmallArray:
    def test_full_range(self, small):
        assert query_sparse_table(0, 2, small) == 1

    def test_left_pair(self, small):
        assert query_sparse_table(0, 1, small) == 1

    def test_right_pair(self, small):
        assert query_sparse_table(1, 2, small) == 1

    def test_query_value(self, small):
        assert small.query_value(0, 2) == 2

    def test_singletons(self, small):
        for i in range(3):
            assert small.query(i, i) == i

    def test_levels_shape(self, small):
        # n = 3: level 0 (identity) and level 1 only
        assert small.max_level == 1
        assert small.levels[0].tolist() == [0, 1, 2]
        assert small.levels[1].tolist() == [1, 1]

    def test_returns_python_int(self, small):
        assert type(small.query(0, 2)) is int
        assert type(small.query(2, 2)) is int


# ======================================================================== #
# 2. Leftmost tie-break                                                     #
# ======================================================================== #


class TestLeftmostTieBreak:
    def test_every_range_matches_brute_force(self, plateau):
        for i, j in all_ranges(len(PLATEAU)):
            assert plateau.query(i, j) == leftmost_argmin(PLATEAU, i, j), (i, j)

    def test_global_minimum_is_leftmost(self, plateau):
        assert plateau.query(0, len(PLATEAU) - 1) == 5

    def test_all_equal(self):
        values = [4] * 17
        table = build_sparse_table(values)
        for i, j in all_ranges(len(values)):
            assert table.query(i, j) == i

    def test_level_one_left_wins_tie(self):
        table = build_sparse_table([2, 2, 2])
        assert table.levels[1].tolist() == [0, 1]

    def test_higher_level_left_wins_tie(self):
        # windows [0..3] and [4..7] both have minimum 0, at 1 and 5
        table = build_sparse_table([1, 0, 1, 1, 1, 0, 1, 1])
        assert table.levels[3].tolist() == [1]
        assert table.query(2, 7) == 5
        assert table.query(0, 7) == 1


# ======================================================================== #
# 3. Degenerate sizes                                                       #
# ======================================================================== #


class TestDegenerate:
    def test_empty_sequence(self):
        table = build_sparse_table([])
        assert table.n == 0
        assert len(table) == 0
        assert table.levels == []
        assert table.flat.shape == (0,)

    def test_empty_generator(self):
        table = build_sparse_table(x for x in [])
        assert table.n == 0

    def test_single_element(self):
        table = build_sparse_table([42])
        assert table.max_level == 0
        assert table.flat.shape == (0,)
        assert table.query(0, 0) == 0

    @pytest.mark.parametrize(
        "values, expected",
        [([7, 7], 0), ([9, 4], 1), ([4, 9], 0)],
    )
    def test_two_elements_build_level_one(self, values, expected):
        table = build_sparse_table(values)
        assert table.max_level == 1
        assert table.query(0, 1) == expected

    def test_empty_range_is_contract_violation(self, small):
        with pytest.raises(AssertionError):
            small.query(2, 1)

    def test_out_of_bounds_is_contract_violation(self, small):
        with pytest.raises(AssertionError):
            small.query(0, 3)

    def test_query_on_empty_table_is_contract_violation(self):
        with pytest.raises(AssertionError):
            build_sparse_table([]).query(0, 0)


# ======================================================================== #
# 4. Element and container types                                            #
# ======================================================================== #


class TestElementTypes:
    def test_floats(self):
        values = [0.5, -1.25, 3.0, -1.25, 2.0]
        table = build_sparse_table(values)
        assert table.query(0, 4) == 1
        assert table.query(2, 4) == 3

    def test_strings(self):
        values = ["pear", "apple", "fig", "apple"]
        table = build_sparse_table(values)
        assert table.values.dtype.kind == "U"
        assert table.query(0, 3) == 1
        assert table.query(2, 3) == 3

    def test_tuples_stay_whole_elements(self):
        values = [(2, 1), (1, 9), (1, 2), (3, 0)]
        table = build_sparse_table(values)
        assert table.values.dtype == object
        assert table.values.shape == (4,)
        assert table.query(0, 3) == 2

    def test_tuples_of_mixed_length(self):
        table = build_sparse_table([(1,), (0, 5), (0, 1, 2)])
        assert table.values.shape == (3,)
        assert table.values[1] == (0, 5)
        assert table.query(0, 2) == 2

    def test_fractions(self):
        values = [Fraction(1, 2), Fraction(1, 3), Fraction(2, 3)]
        table = build_sparse_table(values)
        assert table.query(0, 2) == 1

    def test_integers_beyond_int64_keep_exact_order(self):
        values = [2**63 + 1, 2**63, -1, 5]
        table = build_sparse_table(values)
        assert table.values.dtype == object
        assert table.query(0, 1) == 1
        assert table.query(0, 3) == 2
        assert table.query_value(0, 1) == 2**63

    def test_large_integers_next_to_floats_are_not_rounded(self):
        values = [2**53 + 1, 2**53, 0.5, 2**53]
        table = build_sparse_table(values)
        assert table.query(0, 1) == 1
        assert table.query(0, 3) == 2
        assert table.query(3, 3) == 3
        assert table.query_many([0], [1]).tolist() == [1]

    def test_small_integers_next_to_floats_stay_native(self):
        table = build_sparse_table([3, 0.5, 2])
        assert table.values.dtype == np.float64
        assert table.query(0, 2) == 1

    def test_forward_only_iterable(self):
        table = build_sparse_table(iter([3, 1, 2]))
        assert table.query(0, 2) == 1

    def test_numpy_input_is_copied(self):
        values = np.array([3, 1, 2])
        table = build_sparse_table(values)
        values[1] = 10
        assert table.values[1] == 1
        assert table.query(0, 2) == 1

    def test_tables_are_read_only(self, small):
        with pytest.raises(ValueError):
            small.values[0] = 0
        with pytest.raises(ValueError):
            small.levels[1][0] = 0


# ======================================================================== #
# 5. Determinism and rebuild                                                #
# ======================================================================== #


class TestDeterminism:
    def test_rebuild_twice_is_byte_identical(self):
        rng = np.random.default_rng(7)
        values = rng.integers(0, 5, size=200)
        a = build_sparse_table(values)
        b = build_sparse_table(values)
        assert len(a.levels) == len(b.levels)
        for la, lb in zip(a.levels, b.levels):
            assert la.tobytes() == lb.tobytes()
        assert a.flat.tobytes() == b.flat.tobytes()

    def test_rebuild_replaces_contents(self):
        table = SparseTable([5, 2, 8])
        flat_before = table.flat
        table.rebuild([1, 9, 9, 9, 0])
        assert table.n == 5
        assert table.query(0, 4) == 4
        assert table.flat is not flat_before
        assert table.flat.shape[0] == 4 + 2


# ======================================================================== #
# 6. Flat layout                                                            #
# ======================================================================== #


class TestFlatLayout:
    @pytest.mark.parametrize("n", [2, 3, 4, 5, 8, 13, 16, 33])
    def test_offset_formula_matches_ragged_levels(self, n):
        rng = np.random.default_rng(n)
        table = build_sparse_table(rng.integers(0, 4, size=n))
        flat = table.flat
        for level in range(1, table.max_level + 1):
            for i in range(n - (1 << level) + 1):
                offset = translate_sparse_table(i, level, n)
                assert flat[offset] == table.levels[level][i]

    @pytest.mark.parametrize("n", [2, 3, 7, 16, 31])
    def test_flat_builder_equals_concatenated_levels(self, n):
        rng = np.random.default_rng(100 + n)
        values = rng.integers(0, 3, size=n)
        _, flat = build_flat_sparse_table(values)
        assert flat.tolist() == build_sparse_table(values).flat.tolist()

    def test_flat_size(self):
        n = 10
        _, flat = build_flat_sparse_table(range(n))
        # levels 1..3 hold 9 + 7 + 3 entries
        assert flat.shape[0] == 19
        assert translate_sparse_table(0, 3, n) == 16

    def test_flat_empty_below_two(self):
        for values in ([], [1]):
            _, flat = build_flat_sparse_table(values)
            assert flat.shape == (0,)

    def test_flat_query_matches_ragged_query(self):
        values, flat = build_flat_sparse_table(PLATEAU)
        table = build_sparse_table(PLATEAU)
        n = len(PLATEAU)
        for i, j in all_ranges(n):
            assert query_flat_sparse_table(i, j, n, flat, values) == table.query(i, j)

    def test_flat_query_small_array(self):
        values, flat = build_flat_sparse_table([5, 2, 8])
        assert query_flat_sparse_table(0, 2, 3, flat, values) == 1
        assert query_flat_sparse_table(0, 1, 3, flat, values) == 1
        assert query_flat_sparse_table(1, 2, 3, flat, values) == 1

    def test_flat_query_contract(self):
        values, flat = build_flat_sparse_table([5, 2, 8])
        with pytest.raises(AssertionError):
            query_flat_sparse_table(2, 0, 3, flat, values)


# ======================================================================== #
# 7. Randomized cross-check                                                 #
# ======================================================================== #


@pytest.mark.slow
class TestRandomized:
    @pytest.mark.parametrize("seed", range(10))
    def test_random_integer_sequences(self, seed):
        rng = np.random.default_rng(seed)
        n = int(rng.integers(1, 70))
        values = rng.integers(0, 6, size=n).tolist()
        table = build_sparse_table(values)
        for i, j in all_ranges(n):
            k = table.query(i, j)
            assert i <= k <= j
            assert k == leftmost_argmin(values, i, j)

    def test_query_full_range_is_global_leftmost_min(self):
        rng = np.random.default_rng(11)
        for _ in range(20):
            values = rng.integers(0, 10, size=int(rng.integers(1, 100)))
            table = build_sparse_table(values)
            assert table.query(0, len(values) - 1) == int(np.argmin(values))
