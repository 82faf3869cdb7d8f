"""
lcarmq
======

Constant-time range minimum queries (RMQ) over static sequences, and
constant-time lowest common ancestor (LCA) queries on static rooted trees
built on top of them.

A sparse table over n elements costs Θ(n log n) to build and answers any
``[i, j]`` minimum query with two table lookups.  An LCA index runs one
depth-first Euler tour of the tree (via networkx), records each vertex's
first tour position, and builds a sparse table over the tour depths; the
LCA of u and v is then the shallowest tour entry between their first
positions.  Ties always resolve to the leftmost index.

Main Classes
------------
SparseTable : Range-minimum sparse table over a static sequence
EulerTourLCA : Rooted tree with O(1) LCA, depth and distance queries

Functions
---------
build_sparse_table, query_sparse_table : Sparse table build and query
build_flat_sparse_table, query_flat_sparse_table, translate_sparse_table :
    Contiguous single-buffer layout of the same table
euler_tour : Euler tour and depth sequence of a rooted tree
representative_element : First-occurrence index of each distinct item
lca_preprocess, lca_query : LCA index build and query

Context Managers
----------------
quiet : Suppress logging during operations
suppress_logger : Suppress specific logger
suppress_warnings : Suppress specific warnings
use_backend : Force specific backend for batched queries

Examples
--------
>>> from lcarmq import build_sparse_table, query_sparse_table
>>> table = build_sparse_table([5, 2, 8])
>>> query_sparse_table(0, 2, table)
1

>>> from lcarmq import lca_preprocess, lca_query
>>> E, L, R, M = lca_preprocess({0: [1, 2], 1: [3, 4]})
>>> lca_query(3, 4, E, L, R, M)
1
>>> lca_query(3, 2, E, L, R, M)
0

Batched queries:

>>> from lcarmq import EulerTourLCA, use_backend
>>> tree = EulerTourLCA({0: [1, 2], 1: [3, 4]})
>>> with use_backend('cpu-parallel'):
...     tree.lca_many([(3, 4), (3, 2)])
[1, 0]
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Main classes
from ._sparse_table import (
    SparseTable,
    build_sparse_table,
    query_sparse_table,
    translate_sparse_table,
    build_flat_sparse_table,
    query_flat_sparse_table,
)
from ._lca import LCAIndex, EulerTourLCA, lca_preprocess, lca_query
from ._traversal import euler_tour

# Context managers (user-facing utilities)
from ._context import (
    suppress_logger,
    quiet,
    suppress_warnings,
    use_backend,
)

# Utilities (generally useful functions)
from ._utils import lower_log2, pow2, representative_element

# Backend information (useful for checking capabilities)
from ._backend import get_available_backends, get_backend_info

# Public API
__all__ = [
    # Main classes
    "SparseTable",
    "EulerTourLCA",
    "LCAIndex",
    # Sparse table
    "build_sparse_table",
    "query_sparse_table",
    "translate_sparse_table",
    "build_flat_sparse_table",
    "query_flat_sparse_table",
    # LCA
    "euler_tour",
    "lca_preprocess",
    "lca_query",
    # Context managers
    "suppress_logger",
    "quiet",
    "suppress_warnings",
    "use_backend",
    # Utilities
    "lower_log2",
    "pow2",
    "representative_element",
    # Backend information
    "get_available_backends",
    "get_backend_info",
    # Version info
    "__version__",
]
