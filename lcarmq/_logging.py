"""
_logging.py
===========
Logging functions for lcarmq.

All functions in this module have NO side effects except logging. They take
computed data as parameters and format/emit log messages.

This separation ensures:
- Logging can be easily disabled/mocked in tests
- Computation is separate from presentation
- Clear boundaries between preprocessing and reporting
"""

import logging
from typing import Any, Hashable


logger = logging.getLogger(__name__)


# ============================================================================ #
# System Logging (called at module import time)
# ============================================================================ #


def log_optimization_status() -> None:
    """
    Log system capabilities and numba configuration at INFO level.

    Called once at import time of the sparse-table module. Reports CPU count,
    Python version, numba and llvmlite versions and the thread count used
    by the ``cpu-parallel`` backend.
    """
    import os
    import platform

    import llvmlite
    import numba

    cpu_count = os.cpu_count() or 1
    logger.info(
        "System: %s (%s), %d CPU cores, Python %s",
        platform.machine(),
        platform.system(),
        cpu_count,
        platform.python_version(),
    )
    logger.info(
        "Numba %s loaded (llvmlite %s), %d threads for cpu-parallel queries",
        numba.__version__,
        llvmlite.__version__,
        numba.get_num_threads(),
    )


def install_numba_warning_filter() -> None:
    """
    Capture NumbaPerformanceWarning and route it through our logger.

    numba issues performance warnings (e.g., "parallel=True but no prange
    found") via Python's warnings module.  This replaces
    ``warnings.showwarning`` with a wrapper that logs those at WARNING level
    and hands every other warning to the original display function.
    """
    import warnings

    from numba.core.errors import NumbaPerformanceWarning

    original_showwarning = warnings.showwarning

    def custom_showwarning(message, category, filename, lineno, file=None, line=None):
        if issubclass(category, NumbaPerformanceWarning):
            logger.warning("Numba performance issue: %s", message)
            logger.warning("  at %s:%d", filename, lineno)
            return
        original_showwarning(message, category, filename, lineno, file, line)

    warnings.showwarning = custom_showwarning


# ============================================================================ #
# Preprocessing Logging (called after each build)
# ============================================================================ #


def log_table_statistics(n: int, n_levels: int, n_entries: int, nbytes: int) -> None:
    """
    Log the shape of a freshly built sparse table at DEBUG level.

    Parameters
    ----------
    n : int
        Length of the preprocessed sequence.
    n_levels : int
        Number of stored levels above the identity level.
    n_entries : int
        Total stored entries across all levels.
    nbytes : int
        Memory held by the table arrays, in bytes.
    """
    logger.debug(
        "Sparse table built: n=%d, levels=%d, entries=%d, %.1f KB",
        n,
        n_levels,
        n_entries,
        nbytes / 1024,
    )


def log_tour_statistics(
    n_vertices: int, tour_length: int, max_depth: int, root: Hashable
) -> None:
    """
    Log the Euler tour of a tree at DEBUG level.

    Parameters
    ----------
    n_vertices : int
        Number of vertices visited.
    tour_length : int
        Length of the tour (2n - 1 for a tree).
    max_depth : int
        Largest depth reached.
    root : Hashable
        Root vertex the traversal started from.
    """
    logger.debug(
        "Euler tour from root %r: %d vertices, tour length %d, max depth %d",
        root,
        n_vertices,
        tour_length,
        max_depth,
    )


def log_index_statistics(
    n_vertices: int, tour_length: int, max_depth: int, memory_bytes: int
) -> None:
    """Log a summary of a built LCA index at INFO level."""
    logger.info(
        "LCA index built: %d vertices, tour length %d, max depth %d",
        n_vertices,
        tour_length,
        max_depth,
    )

    mem_mb = memory_bytes / (1024**2)
    if mem_mb >= 1.0:
        logger.info("LCA index memory footprint: %.1f MB", mem_mb)
    else:
        logger.info("LCA index memory footprint: %.1f KB", memory_bytes / 1024)


# ============================================================================ #
# Helper Functions for Computing Data (not logging)
# ============================================================================ #


def compute_table_footprint(table: Any) -> int:
    """
    Compute the memory held by a sparse table's arrays.

    Parameters
    ----------
    table : Any
        A ``SparseTable``.

    Returns
    -------
    int
        Total bytes of the value array, ragged and flat levels and the
        log2 table.
        Object arrays count only their pointer storage.
    """
    mem_bytes = table.values.nbytes + table.log2_table.nbytes + table.flat.nbytes
    for level in table.levels:
        mem_bytes += level.nbytes
    return mem_bytes
