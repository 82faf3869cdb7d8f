"""
_kernels.py
===========
Numba-compiled range-minimum kernels over the flat sparse-table layout.

This module contains ONLY numba-accelerated code and should not import other
project modules to avoid import-time complications.  Every kernel takes plain
numpy arrays and scalars; the host wrappers in ``_sparse_table.py`` extract
the arrays from a ``SparseTable`` and validate ranges before calling in.

Exported Functions
------------------
_translate_nb : njit function
    Flat offset of sparse-table entry ``(i, level)``.

_rmq_flat_nb : njit function
    O(1) range minimum query for one ``[i, j]`` range.

_rmq_batch_njit : njit function
    Parallel range minimum queries for arrays of ranges.

Notes
-----
- Level 0 is implicit and never stored, so level ``k`` starts at offset
  ``(k - 1) * n - (2**k - k - 1)`` in the flat buffer (level 1 at 0).
- cache=True persists compiled binary to disk for faster subsequent runs.
"""

import numba
from numba import njit, prange


NUMBA_VERSION = numba.__version__


# ======================================================================== #
# CPU Kernels                                                               #
# ======================================================================== #


@njit(cache=True)
def _translate_nb(i, level, n):
    """Flat offset of entry ``i`` of ``level`` (>= 1) for an input of size n."""
    if level == 1:
        return i
    return (level - 1) * n - ((1 << level) - level - 1) + i


@njit(cache=True)
def _rmq_flat_nb(i, j, n, flat, values, log2_table):
    """
    O(1) RMQ over the flat sparse table.

    Parameters
    ----------
    i, j       : int
        Inclusive range (caller ensures 0 <= i <= j < n).
    n          : int
        Length of *values*.
    flat       : int64[:]
        Levels 1..floor(log2 n) concatenated.
    values     : numeric[:]
        The preprocessed sequence.
    log2_table : int32[:]
        floor(log2(x)) for x in [0, n].

    Returns
    -------
    int
        Leftmost index of a minimum of ``values[i..j]``.
    """
    if i == j:
        return i
    k = log2_table[j - i + 1]
    x = flat[_translate_nb(i, k, n)]
    y = flat[_translate_nb(j - (1 << k) + 1, k, n)]
    if values[y] < values[x]:
        return y
    return x


@njit(parallel=True, cache=True)
def _rmq_batch_njit(lefts, rights, n, flat, values, log2_table, out):
    """
    Parallel RMQ for ``len(lefts)`` ranges; results written into *out*.

    Each query is independent and only reads the table, so the prange loop
    needs no synchronisation.
    """
    for q in prange(lefts.shape[0]):
        out[q] = _rmq_flat_nb(lefts[q], rights[q], n, flat, values, log2_table)
