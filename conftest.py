"""
conftest.py
===========
Session-level pytest configuration for the test suite.

Custom marks
------------
slow
    Applied to randomized brute-force cross-checks over many sequences and
    trees.  Run by default; skip with ``-m "not slow"``.

    Registration here suppresses PytestUnknownMarkWarning and makes the mark
    visible in ``pytest --markers``.

Warning filters
---------------
NumbaPerformanceWarning messages are filtered out during tests. Warnings
about parallel under-utilization are expected with small test data and are
not informative for correctness testing.
"""

import warnings


def pytest_configure(config):
    """
    Configure pytest before test collection begins.

    This runs before any test modules are imported, which is important for
    catching warnings from numba kernel compilation.
    """
    config.addinivalue_line(
        "markers",
        "slow: randomized brute-force cross-checks (skip with -m 'not slow')",
    )

    from numba.core.errors import NumbaPerformanceWarning

    warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


def pytest_unconfigure(config):
    """Restore default warning behavior."""
    warnings.resetwarnings()
