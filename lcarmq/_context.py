"""
_context.py
===========
Context managers for lcarmq.

Provides clean, Pythonic context managers for temporarily changing state:
- Logging control (suppress/change levels)
- Warning control (suppress specific warnings)
- Backend selection (force a backend for batched queries)

All context managers properly restore state on exit, even if exceptions occur.
"""

import logging
import warnings
from contextlib import contextmanager
from typing import Optional, Type

from lcarmq._backend import BACKENDS


# Module-level state for backend override
_backend_override = None

# Parent of every module logger in the package
PACKAGE_LOGGER = "lcarmq"


# ============================================================================ #
# Logging Context Managers
# ============================================================================ #


@contextmanager
def suppress_logger(logger_name: str, level: int = logging.CRITICAL):
    """
    Temporarily change a logger's level.

    Parameters
    ----------
    logger_name : str
        Name of the logger to suppress (e.g., 'lcarmq._lca').
    level : int, default logging.CRITICAL
        Temporary logging level.

    Yields
    ------
    None
        Control is yielded back to the with-block.

    Examples
    --------
    >>> with suppress_logger('lcarmq._lca'):
    ...     index = EulerTourLCA(graph)

    Notes
    -----
    - Exception-safe: Logger level restored even if exception raised
    - Nesting-safe: Can nest multiple suppress_logger contexts
    """
    logger = logging.getLogger(logger_name)
    original_level = logger.level

    try:
        logger.setLevel(level)
        yield
    finally:
        logger.setLevel(original_level)


@contextmanager
def quiet(level: int = logging.CRITICAL):
    """
    Temporarily suppress all lcarmq logging.

    Module loggers are children of the ``lcarmq`` logger and inherit its
    level, so raising that one level silences the whole package.

    Examples
    --------
    >>> with quiet():
    ...     index = EulerTourLCA(graph)

    >>> with quiet(logging.WARNING):
    ...     table = build_sparse_table(values)
    """
    with suppress_logger(PACKAGE_LOGGER, level):
        yield


# ============================================================================ #
# Warning Context Managers
# ============================================================================ #


@contextmanager
def suppress_warnings(category: Optional[Type[Warning]] = None):
    """
    Temporarily suppress warnings.

    Parameters
    ----------
    category : Type[Warning] or None, default None
        Warning category to suppress. If None, suppresses all warnings.

    Examples
    --------
    >>> from numba.core.errors import NumbaPerformanceWarning
    >>> with suppress_warnings(NumbaPerformanceWarning):
    ...     idx = table.query_many(lefts, rights)
    """
    with warnings.catch_warnings():
        if category is None:
            warnings.simplefilter("ignore")
        else:
            warnings.filterwarnings("ignore", category=category)
        yield


# ============================================================================ #
# Backend Context Managers
# ============================================================================ #


@contextmanager
def use_backend(backend: str):
    """
    Temporarily force a specific backend for batched queries.

    The override applies to ``query_many`` / ``lca_many`` calls whose
    ``backend`` argument is left at ``'best'``.

    Parameters
    ----------
    backend : str
        'python', 'cpu-parallel' or 'best'.

    Raises
    ------
    ValueError
        If the backend name is unknown.

    Examples
    --------
    >>> with use_backend('python'):
    ...     idx = table.query_many(lefts, rights)

    Notes
    -----
    This context manager modifies module-level state and is NOT thread-safe.
    Pass ``backend=`` directly to the query call from threaded code.
    """
    global _backend_override

    if backend != "best" and backend not in BACKENDS:
        raise ValueError(
            f"Unknown backend '{backend}'. "
            f"Valid backends: best, {', '.join(BACKENDS)}"
        )

    original_override = _backend_override

    try:
        _backend_override = backend
        yield
    finally:
        _backend_override = original_override


def get_backend_override() -> Optional[str]:
    """
    Get the current backend override, if any.

    Examples
    --------
    >>> get_backend_override()
    None

    >>> with use_backend('python'):
    ...     print(get_backend_override())
    python
    """
    return _backend_override
