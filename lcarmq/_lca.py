"""
_lca.py
=======
Lowest common ancestor queries on a static rooted tree in O(1) after
O(n log n) preprocessing, by reduction to range minimum queries over the
Euler tour's depth sequence (Berkman and Vishkin; Bender et al. 2005).

Public API
----------
  lca_preprocess(graph, root=None) -> LCAIndex(E, L, R, M)
  lca_query(u, v, E, L, R, M)      -> vertex

  EulerTourLCA(graph, root=None)
      Builds and owns an LCAIndex.

  .lca(u, v)
  .lca_many(pairs, backend='best')
  .multi_lca(vertices)
  .depth(v)
  .distance(u, v, return_lca=False)
  .is_ancestor(u, v)
  .stats()

Why it works
------------
Between the first occurrences of u and v in a depth-first Euler tour, the
traversal climbs out of u's branch no higher than their lowest common
ancestor and then descends into v's branch, so the shallowest tour entry in
that window is the LCA.  The sparse table's leftmost tie-break makes the
answer deterministic.
"""

from typing import Dict, Hashable, Iterable, List, NamedTuple, Optional

import numpy as np

from lcarmq._logging import compute_table_footprint, log_index_statistics
from lcarmq._sparse_table import SparseTable, build_sparse_table, query_sparse_table
from lcarmq._traversal import euler_tour
from lcarmq._utils import representative_element


class LCAIndex(NamedTuple):
    """
    Everything an LCA query needs; unpacks as ``(E, L, R, M)``.

    euler_tour      : list          Vertices in Euler-tour order (E).
    levels          : int64 ndarray Depth of each tour entry (L).
    representatives : dict          Vertex -> first tour index (R).
    table           : SparseTable   Sparse table over ``levels`` (M).
    """

    euler_tour: List[Hashable]
    levels: np.ndarray
    representatives: Dict[Hashable, int]
    table: SparseTable


def lca_preprocess(graph, root: Optional[Hashable] = None) -> LCAIndex:
    """
    Preprocess a rooted tree for LCA querying.

    Parameters
    ----------
    graph : networkx.DiGraph or adjacency data
        Tree with edges directed from parent to child.
    root : Hashable, optional
        Root vertex; inferred as the unique source when omitted.

    Returns
    -------
    LCAIndex
        ``(E, L, R, M)``; all four empty for a graph with no vertices.

    Notes
    -----
    Time complexity: Θ(n log n), dominated by the sparse table.
    """
    tour, levels = euler_tour(graph, root)  # Θ(n)
    representatives = representative_element(tour)  # Θ(n)
    table = build_sparse_table(levels)  # Θ(n lg n)
    return LCAIndex(tour, table.values, representatives, table)


def lca_query(u: Hashable, v: Hashable, E, L, R, M: SparseTable) -> Hashable:
    """
    Return the lowest common ancestor of *u* and *v*.

    *u* and *v* may be given in either order:
    ``lca_query(u, v, ...) == lca_query(v, u, ...)``.  ``L`` is accepted so
    the full ``(E, L, R, M)`` tuple can be passed straight through; the
    table already holds the depths it was built from.

    Raises
    ------
    KeyError
        If either vertex is not in the indexed tree.

    Notes
    -----
    Time complexity: Θ(1).
    """
    i, j = R[u], R[v]
    if j < i:
        i, j = j, i
    return E[query_sparse_table(i, j, M)]


class EulerTourLCA:
    """
    A rooted tree preprocessed for O(1) LCA, depth and distance queries.

    Attributes (all read-only after construction)
    ----------------------------------------------
    index      : LCAIndex  The ``(E, L, R, M)`` tuple.
    root       : Hashable  Root vertex (None for an empty tree).
    n_vertices : int       Number of vertices.
    max_depth  : int       Largest depth; -1 for an empty tree.
    """

    def __init__(self, graph, root: Optional[Hashable] = None) -> None:
        """
        Build the Euler tour, first-occurrence map and sparse table.

        Parameters
        ----------
        graph : networkx.DiGraph or adjacency data
            Tree with edges directed from parent to child.
        root : Hashable, optional
            Root vertex; inferred as the unique source when omitted.
        """
        self.index = lca_preprocess(graph, root)

        tour = self.index.euler_tour
        self.root = tour[0] if tour else None
        self.n_vertices: int = len(self.index.representatives)
        self.max_depth: int = int(self.index.levels.max()) if tour else -1

        log_index_statistics(
            self.n_vertices,
            len(tour),
            self.max_depth,
            compute_table_footprint(self.index.table),
        )

    # ================================================================== #
    # Public methods                                                       #
    # ================================================================== #

    def lca(self, u: Hashable, v: Hashable) -> Hashable:
        """Return the lowest common ancestor of *u* and *v*."""
        return lca_query(u, v, *self.index)

    def lca_many(self, pairs: Iterable, backend: str = "best") -> list:
        """
        Return the LCA of every ``(u, v)`` pair in *pairs*.

        Parameters
        ----------
        pairs : Iterable[tuple]
            Vertex pairs, either order within a pair.
        backend : str, default 'best'
            Backend for the batched RMQ ('python', 'cpu-parallel', 'best').

        Returns
        -------
        list
            LCA vertices in the order of *pairs*.
        """
        R = self.index.representatives
        firsts = [(R[u], R[v]) for u, v in pairs]
        lefts = np.fromiter((min(f) for f in firsts), dtype=np.int64, count=len(firsts))
        rights = np.fromiter((max(f) for f in firsts), dtype=np.int64, count=len(firsts))
        positions = self.index.table.query_many(lefts, rights, backend=backend)
        tour = self.index.euler_tour
        return [tour[m] for m in positions.tolist()]

    def multi_lca(self, vertices: Iterable[Hashable]) -> Hashable:
        """
        Return the lowest common ancestor of every vertex in *vertices*.

        One RMQ spanning the smallest and largest first occurrence covers
        the tour between every pair of the set, so its minimum is the LCA
        of all of them.

        Raises
        ------
        ValueError
            If *vertices* is empty.
        """
        R = self.index.representatives
        firsts = [R[v] for v in vertices]
        if not firsts:
            raise ValueError("multi_lca requires at least one vertex.")
        m = query_sparse_table(min(firsts), max(firsts), self.index.table)
        return self.index.euler_tour[m]

    def depth(self, v: Hashable) -> int:
        """Return the edge depth of *v* (root has depth 0)."""
        return int(self.index.levels[self.index.representatives[v]])

    def distance(self, u: Hashable, v: Hashable, return_lca: bool = False):
        """
        Return the number of edges on the path between *u* and *v*.

            distance(u, v) = depth(u) + depth(v) − 2 × depth(LCA(u, v))

        Parameters
        ----------
        u, v : Hashable
            Vertices of the tree.
        return_lca : bool
            If True return ``(distance, lca)``.
        """
        ancestor = self.lca(u, v)
        dist = self.depth(u) + self.depth(v) - 2 * self.depth(ancestor)
        return (dist, ancestor) if return_lca else dist

    def is_ancestor(self, u: Hashable, v: Hashable) -> bool:
        """Return True if *u* is an ancestor of *v* (or ``u == v``)."""
        return self.lca(u, v) == u

    def stats(self) -> dict:
        """Get statistics about the LCA structure."""
        table = self.index.table
        return {
            "n_vertices": self.n_vertices,
            "tour_length": len(self.index.euler_tour),
            "max_depth": self.max_depth,
            "table_levels": max(table.max_level, 0),
            "table_entries": int(table.flat.shape[0]),
        }

    def __contains__(self, v: Hashable) -> bool:
        return v in self.index.representatives

    def __len__(self) -> int:
        return self.n_vertices

    def __repr__(self) -> str:
        return (
            f"EulerTourLCA(n_vertices={self.n_vertices}, root={self.root!r}, "
            f"max_depth={self.max_depth})"
        )
