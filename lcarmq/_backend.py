"""
_backend.py
===========
Backend detection and selection for batched range-minimum queries.

Two execution backends exist:

- ``python``: loops over the scalar query; works for any element type.
- ``cpu-parallel``: numba ``njit(parallel=True)`` kernel over the flat
  sparse-table layout; requires a numeric value array.

Functions in this module have NO side effects - they only inspect their
arguments and the installed numba.  Logging is done by the calling code.
"""

from typing import List, Optional

import numpy as np


BACKENDS = ("python", "cpu-parallel")

# dtypes numba can type; float16 and extended precision are not among them
KERNEL_DTYPES = frozenset(
    np.dtype(t)
    for t in (
        np.bool_,
        np.int8,
        np.int16,
        np.int32,
        np.int64,
        np.uint8,
        np.uint16,
        np.uint32,
        np.uint64,
        np.float32,
        np.float64,
    )
)


# ============================================================================ #
# Backend Detection (No Side Effects)
# ============================================================================ #


def is_numeric(values: Optional[np.ndarray]) -> bool:
    """Return True if *values* can be handed to the compiled kernels."""
    return values is not None and values.dtype in KERNEL_DTYPES


def get_available_backends(values: Optional[np.ndarray] = None) -> List[str]:
    """
    Get list of execution backends usable for *values*.

    Parameters
    ----------
    values : np.ndarray or None
        Value array of a built table.  None asks about the installation
        alone, assuming numeric data.

    Returns
    -------
    list[str]
        Backends in preference order, last is best.  Always includes
        'python'; includes 'cpu-parallel' unless *values* is non-numeric.

    Examples
    --------
    >>> get_available_backends()
    ['python', 'cpu-parallel']

    >>> get_available_backends(np.array(['a', 'b']))
    ['python']
    """
    backends = ["python"]
    if values is None or is_numeric(values):
        backends.append("cpu-parallel")
    return backends


def get_best_backend(values: Optional[np.ndarray] = None) -> str:
    """Return the most optimized backend usable for *values*."""
    return get_available_backends(values)[-1]


def resolve_backend(backend: str, values: Optional[np.ndarray] = None) -> str:
    """
    Resolve a backend name to an actual backend.

    Parameters
    ----------
    backend : str
        'best', 'python' or 'cpu-parallel'.
    values : np.ndarray or None
        Value array the query will run against.

    Returns
    -------
    str
        Resolved backend name.

    Raises
    ------
    ValueError
        If the backend name is unknown or unusable for *values*.

    Examples
    --------
    >>> resolve_backend('best', np.arange(4))
    'cpu-parallel'

    >>> resolve_backend('best', np.array([(1, 2)], dtype=object))
    'python'
    """
    if backend == "best":
        return get_best_backend(values)

    if backend not in BACKENDS:
        raise ValueError(
            f"Unknown backend '{backend}'. "
            f"Valid backends: best, {', '.join(BACKENDS)}"
        )

    available = get_available_backends(values)
    if backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available for dtype {values.dtype}. "
            f"Available backends: {', '.join(available)}"
        )

    return backend


# ============================================================================ #
# Module-Level State Query (Read-Only)
# ============================================================================ #


def get_backend_info() -> dict:
    """
    Get comprehensive backend information.

    Returns
    -------
    dict
        Dictionary with keys:
        - 'numba_version': str
        - 'num_threads': int
        - 'backends': list[str]
        - 'best_backend': str

    Examples
    --------
    >>> info = get_backend_info()
    >>> info['backends']
    ['python', 'cpu-parallel']
    """
    import numba

    return {
        "numba_version": numba.__version__,
        "num_threads": numba.get_num_threads(),
        "backends": get_available_backends(),
        "best_backend": get_best_backend(),
    }
