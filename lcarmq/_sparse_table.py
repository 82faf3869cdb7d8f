"""
_sparse_table.py
================
Sparse-table Range Minimum Query over a static sequence: O(n log n)
preprocessing, O(1) queries, leftmost index on ties.

Public API
----------
  SparseTable(sequence)
      Constructor.  Converts the sequence to a value array and builds all
      levels.

  .query(i, j)
  .query_value(i, j)
  .query_many(lefts, rights, backend='best')
  .rebuild(sequence)
  .flat                                            [int64 ndarray]

  build_sparse_table(sequence)
  query_sparse_table(i, j, table)
  translate_sparse_table(i, level, n)
  build_flat_sparse_table(sequence)
  query_flat_sparse_table(i, j, n, flat, values)

Layouts
-------
The ragged layout keeps one index array per level: ``levels[k][i]`` is the
leftmost position of a minimum of ``values[i : i + 2**k]``, for
``0 <= i <= n - 2**k``.  Level 0 is the identity.

The flat layout appends levels 1..floor(log2 n) into one contiguous buffer
(level 0 is never stored).  Level ``k`` holds ``n - 2**k + 1`` entries, so
entry ``(i, k)`` lives at ``translate_sparse_table(i, k, n)``.  This is the
layout the numba kernels read; both layouts answer every query identically.

Element types
-------------
Numeric, boolean, string and datetime inputs are held in a native numpy
array.  Anything else (tuples, ``Fraction``, user classes) is held in a 1-D
``object`` array so that comparisons fall back to Python ``<``, as are
integers that numpy would round to fit a common dtype (beyond int64, or
above 2**53 next to floats).  Only the ``python`` backend can serve object
arrays, and float16 or extended-precision values.
"""

import numbers
from typing import Iterable, Tuple

import numpy as np

from lcarmq._backend import resolve_backend
from lcarmq._context import get_backend_override
from lcarmq._kernels import _rmq_batch_njit
from lcarmq._logging import (
    compute_table_footprint,
    install_numba_warning_filter,
    log_optimization_status,
    log_table_statistics,
)
from lcarmq._utils import build_log2_table, lower_log2, pow2


# ── Report optimization status once at import ────────────────────────────────
log_optimization_status()
install_numba_warning_filter()

# dtype kinds numpy can order element-wise without Python objects
_NATIVE_KINDS = "biufUSmM"

_SCALAR_TYPES = (numbers.Number, str, bytes, np.generic)


def _native_array(items: list):
    """
    Return *items* as a native 1-D numpy array, or None when numpy cannot
    hold them exactly (nested sequences, mixed types, or integers that
    dtype promotion would round).
    """
    if not all(isinstance(item, _SCALAR_TYPES) for item in items):
        return None
    try:
        values = np.asarray(items)
    except OverflowError:
        return None
    if values.ndim != 1:
        return None
    if (
        values.dtype.kind in "iuf"
        and any(isinstance(item, numbers.Integral) for item in items)
        and values.tolist() != items
    ):
        return None
    return values


def _as_values(sequence) -> np.ndarray:
    """
    Materialise *sequence* as a private, read-only 1-D value array.
    """
    if isinstance(sequence, np.ndarray) and sequence.ndim == 1:
        values = np.array(sequence)
    else:
        items = list(sequence)
        if not items:
            values = np.empty(0, dtype=np.int64)
        else:
            values = _native_array(items)
        if values is None:
            # fromiter keeps each tuple whole as one object element
            values = np.fromiter(items, dtype=object, count=len(items))

    if values.dtype.kind not in _NATIVE_KINDS and values.dtype != object:
        values = values.astype(object)

    values.flags.writeable = False
    return values


def _build_levels(values: np.ndarray) -> list:
    """
    Build every level of the ragged sparse table over *values*.

    Level 1 takes ``i + 1`` only where ``values[i + 1] < values[i]``; level
    k >= 2 takes the right half's index only where its value is strictly
    smaller.  The left operand wins every tie, which keeps answers leftmost.
    """
    n = int(values.shape[0])
    if n == 0:
        return []

    levels = [np.arange(n, dtype=np.int64)]
    if n < 2:
        return levels

    positions = np.arange(n - 1, dtype=np.int64)
    levels.append(np.where(values[1:] < values[:-1], positions + 1, positions))

    for k in range(2, lower_log2(n) + 1):
        half = pow2(k - 1)
        valid = n - pow2(k) + 1
        prev = levels[k - 1]
        left_pos = prev[:valid]
        right_pos = prev[half : half + valid]
        levels.append(
            np.where(values[right_pos] < values[left_pos], right_pos, left_pos)
        )

    return levels


class SparseTable:
    """
    Range-minimum sparse table over a static sequence.

    Attributes (all read-only after construction)
    ----------------------------------------------
    values     : ndarray [n]         The preprocessed sequence.
    n          : int                 len(values).
    levels     : list[int64 ndarray] levels[k] has n - 2**k + 1 entries.
    max_level  : int                 floor(log2 n); -1 when n == 0.
    log2_table : int32 [n + 1]       floor(log2(x)) for x in [0, n].
    flat       : int64 ndarray       Levels 1..max_level concatenated.

    Building is the only phase that writes; afterwards any number of
    threads may query the same table concurrently.  ``rebuild`` must not
    run concurrently with queries.
    """

    def __init__(self, sequence: Iterable) -> None:
        """
        Convert *sequence* to a value array and build all levels.

        Parameters
        ----------
        sequence : Iterable
            Totally ordered elements; consumed once.
        """
        self._build(sequence)

    # ================================================================== #
    # Construction                                                         #
    # ================================================================== #

    def _build(self, sequence) -> None:
        values = _as_values(sequence)
        levels = _build_levels(values)
        for level in levels:
            level.flags.writeable = False

        self.values = values
        self.n: int = int(values.shape[0])
        self.levels = levels
        self.max_level: int = len(levels) - 1
        self.log2_table = build_log2_table(self.n)
        self.log2_table.flags.writeable = False

        # Contiguous copy of levels 1..max_level for the compiled kernels
        if len(levels) > 1:
            self.flat = np.concatenate(levels[1:])
        else:
            self.flat = np.empty(0, dtype=np.int64)
        self.flat.flags.writeable = False

        log_table_statistics(
            self.n,
            max(self.max_level, 0),
            sum(len(level) for level in levels[1:]),
            compute_table_footprint(self),
        )

    def rebuild(self, sequence: Iterable) -> None:
        """Replace the table's contents with a fresh build over *sequence*."""
        self._build(sequence)

    # ================================================================== #
    # Public methods                                                       #
    # ================================================================== #

    def query(self, i: int, j: int) -> int:
        """
        Return the leftmost index of a minimum of ``values[i..j]``.

        Parameters
        ----------
        i, j : int   Inclusive range with ``0 <= i <= j < n``.

        Returns
        -------
        int   Index into ``values``.

        Notes
        -----
        Two windows of length ``2**k`` (``k = floor(log2(j - i + 1))``), one
        starting at *i* and one ending at *j*, cover the range; the right
        window's candidate wins only if strictly smaller.
        """
        assert 0 <= i <= j < self.n, f"invalid range [{i}, {j}] for n={self.n}"
        if i == j:
            return int(i)

        k = lower_log2(j - i + 1)
        level = self.levels[k]
        x = int(level[i])
        y = int(level[j - pow2(k) + 1])
        if self.values[y] < self.values[x]:
            return y
        return x

    def query_value(self, i: int, j: int):
        """Return the minimum value of ``values[i..j]``."""
        return self.values[self.query(i, j)]

    def query_many(self, lefts, rights, backend: str = "best") -> np.ndarray:
        """
        Answer a batch of range minimum queries.

        Parameters
        ----------
        lefts, rights : array-like of int
            Inclusive range bounds, same length; each pair must satisfy
            ``0 <= left <= right < n``.
        backend : str, default 'best'
            'python', 'cpu-parallel' or 'best'.  With 'best', an active
            ``use_backend`` override is honoured first.

        Returns
        -------
        np.ndarray
            int64 array of leftmost minimum indices.

        Raises
        ------
        ValueError
            If the bound arrays differ in shape or are not 1-D, or if the
            backend is unknown or unusable for this table's values.
        """
        lefts = np.asarray(lefts, dtype=np.int64)
        rights = np.asarray(rights, dtype=np.int64)
        if lefts.ndim != 1 or lefts.shape != rights.shape:
            raise ValueError(
                f"lefts and rights must be 1-D arrays of equal length, "
                f"got shapes {lefts.shape} and {rights.shape}"
            )
        if lefts.size:
            assert bool(
                np.all(lefts >= 0) and np.all(lefts <= rights) and np.all(rights < self.n)
            ), f"invalid range in batch for n={self.n}"

        if backend == "best" and get_backend_override() is not None:
            backend = get_backend_override()
        backend = resolve_backend(backend, self.values)

        out = np.empty(lefts.shape[0], dtype=np.int64)
        if backend == "cpu-parallel":
            if lefts.size:
                _rmq_batch_njit(
                    lefts, rights, self.n, self.flat, self.values, self.log2_table, out
                )
            return out

        for q, (i, j) in enumerate(zip(lefts.tolist(), rights.tolist())):
            out[q] = self.query(i, j)
        return out

    def __len__(self) -> int:
        return self.n

    def __repr__(self) -> str:
        return (
            f"SparseTable(n={self.n}, levels={max(self.max_level, 0)}, "
            f"dtype={self.values.dtype})"
        )


# ======================================================================== #
# Functional interface                                                      #
# ======================================================================== #


def build_sparse_table(sequence: Iterable) -> SparseTable:
    """
    Preprocess *sequence* for O(1) range minimum queries.

    Time complexity: Θ(n log n).  Sequences of fewer than two elements
    produce a table with no stored levels; single-element ranges never
    consult it.

    Examples
    --------
    >>> table = build_sparse_table([5, 2, 8])
    >>> query_sparse_table(0, 2, table)
    1
    """
    return SparseTable(sequence)


def query_sparse_table(i: int, j: int, table: SparseTable) -> int:
    """
    Leftmost index of a minimum of ``table.values[i..j]``.

    Time complexity: Θ(1).  Requires ``0 <= i <= j < table.n``.
    """
    return table.query(i, j)


def translate_sparse_table(i: int, level: int, n: int) -> int:
    """
    Offset of entry *i* of *level* in the flat layout of an n-element table.

    Level 1 starts at 0.  Level ``k`` starts after levels 1..k-1, whose
    sizes ``n - 2**m + 1`` sum to ``(k - 1) * n - (2**k - k - 1)``.

    Examples
    --------
    >>> translate_sparse_table(3, 1, 10)
    3
    >>> translate_sparse_table(0, 2, 10)   # after the 9 level-1 entries
    9
    >>> translate_sparse_table(0, 3, 10)   # after 9 + 7 entries
    16
    """
    assert level >= 1, "level 0 is not stored in the flat layout"
    if level == 1:
        return i
    return (level - 1) * n - (pow2(level) - level - 1) + i


def build_flat_sparse_table(sequence: Iterable) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the flat, append-only sparse table over *sequence*.

    Each level is appended after the previous one, reading its two
    candidates from the previous level through ``translate_sparse_table``.

    Returns
    -------
    (values, flat) : (ndarray, int64 ndarray)
        The value array and the flat table.  ``flat`` is empty for n < 2.
    """
    values = _as_values(sequence)
    n = int(values.shape[0])
    flat = []

    if n >= 2:
        for i in range(n - 1):
            flat.append(i + 1 if values[i + 1] < values[i] else i)

        for level in range(2, lower_log2(n) + 1):
            half = pow2(level - 1)
            start = translate_sparse_table(0, level - 1, n)
            for i in range(n - pow2(level) + 1):
                x = flat[start + i]
                y = flat[start + i + half]
                flat.append(y if values[y] < values[x] else x)

    flat = np.asarray(flat, dtype=np.int64)
    flat.flags.writeable = False
    return values, flat


def query_flat_sparse_table(
    i: int, j: int, n: int, flat: np.ndarray, values: np.ndarray
) -> int:
    """
    Leftmost index of a minimum of ``values[i..j]`` using the flat layout.

    Time complexity: Θ(1).  Requires ``0 <= i <= j < n``.
    """
    assert 0 <= i <= j < n, f"invalid range [{i}, {j}] for n={n}"
    if i == j:
        return int(i)

    k = lower_log2(j - i + 1)
    x = int(flat[translate_sparse_table(i, k, n)])
    y = int(flat[translate_sparse_table(j - pow2(k) + 1, k, n)])
    if values[y] < values[x]:
        return y
    return x
