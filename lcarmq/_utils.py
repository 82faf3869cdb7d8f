"""
_utils.py
=========
General-purpose integer and sequence helpers for lcarmq.

These are standalone functions that don't depend on the main classes
and are shared by the sparse table, the compiled kernels and the LCA
preprocessor.
"""

from typing import Dict, Hashable, Iterable, TypeVar

import numpy as np


T = TypeVar("T", bound=Hashable)


def lower_log2(x: int) -> int:
    """
    Return ``floor(log2(x))`` for a positive integer *x*.

    Parameters
    ----------
    x : int
        Positive integer.

    Returns
    -------
    int
        Largest k with ``2**k <= x``.

    Examples
    --------
    >>> lower_log2(1)
    0
    >>> lower_log2(3)
    1
    >>> lower_log2(100)
    6
    >>> lower_log2(10000)
    13
    """
    x = int(x)
    assert x > 0, f"lower_log2 requires a positive integer, got {x}"
    return x.bit_length() - 1


def pow2(k: int) -> int:
    """Return ``2**k``."""
    return 1 << int(k)


def build_log2_table(n: int) -> np.ndarray:
    """
    Build a ``floor(log2(i))`` lookup table for ``i`` in ``[0, n]``.

    ``table[0]`` is 0 as a sentinel; it is never consulted because range
    lengths are always at least 1.

    Parameters
    ----------
    n : int
        Largest range length that will be looked up.

    Returns
    -------
    np.ndarray
        int32 array of length ``n + 1``.

    Examples
    --------
    >>> build_log2_table(8).tolist()
    [0, 0, 1, 1, 2, 2, 2, 2, 3]
    """
    log2_table = np.zeros(max(n, 0) + 1, dtype=np.int32)
    for i in range(2, n + 1):
        log2_table[i] = log2_table[i >> 1] + 1
    return log2_table


def representative_element(sequence: Iterable[T]) -> Dict[T, int]:
    """
    Map each distinct item of *sequence* to the index of its first occurrence.

    A single linear pass with a ``seen`` set: the first insert for a key
    wins, later occurrences of the same key are skipped.  Applied to an
    Euler tour this yields the representative tour position of every
    vertex.

    Parameters
    ----------
    sequence : Iterable[T]
        Any iterable of hashable items.

    Returns
    -------
    dict[T, int]
        ``{item: smallest index k with sequence[k] == item}``.

    Examples
    --------
    >>> representative_element([0, 0, 1, 0, 2, 1, 2, 1])
    {0: 0, 1: 2, 2: 4}

    >>> representative_element([])
    {}
    """
    result = {}
    seen = set()
    for k, item in enumerate(sequence):
        if item not in seen:
            result[item] = k
            seen.add(item)
    return result
