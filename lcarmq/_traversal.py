"""
_traversal.py
=============
Euler tour and depth sequence of a rooted tree, read off networkx's
depth-first search.

``networkx.dfs_labeled_edges`` reports every tree edge twice: ``forward``
when the DFS enters the child and ``reverse`` when it finishes the child
and returns to the parent.  Recording the entered vertex on ``forward``
and the parent on ``reverse`` yields the Euler tour, with the vertex's
depth recorded alongside.  For an n-vertex tree the tour has 2n - 1
entries and consecutive depths differ by exactly 1.
"""

from typing import Hashable, List, Optional, Tuple

import networkx as nx
import numpy as np

from lcarmq._logging import log_tour_statistics


def as_digraph(graph) -> nx.DiGraph:
    """
    Return *graph* as a directed networkx graph with parent → child edges.

    Anything ``networkx.DiGraph`` accepts (an adjacency mapping such as
    ``{0: [1, 2], 1: [3, 4]}``, an edge list) is converted.

    Raises
    ------
    networkx.NetworkXNotImplemented
        If *graph* is an undirected networkx graph.
    """
    if isinstance(graph, nx.Graph):
        if not graph.is_directed():
            raise nx.NetworkXNotImplemented("not implemented for undirected type")
        return graph
    return nx.DiGraph(graph)


def find_root(graph: nx.DiGraph) -> Hashable:
    """
    Return the single vertex of in-degree 0 in a non-empty tree.

    Raises
    ------
    networkx.NetworkXError
        If there are several sources, none (the graph has a cycle), or a
        vertex has more than one parent.
    """
    root = None
    for node, deg in graph.in_degree:
        if deg == 0:
            if root is not None:
                raise nx.NetworkXError("No root specified and tree has multiple sources.")
            root = node
        elif deg > 1:
            raise nx.NetworkXError("LCA by Euler tour is only defined on trees.")
    if root is None:
        raise nx.NetworkXError("Graph contains a cycle.")
    return root


def euler_tour(graph, root: Optional[Hashable] = None) -> Tuple[List, np.ndarray]:
    """
    Compute the Euler tour ``E`` and depth sequence ``L`` of a rooted tree.

    Parameters
    ----------
    graph : networkx.DiGraph or adjacency data
        Tree with edges directed from parent to child.  Children are
        visited in networkx successor (insertion) order.
    root : Hashable, optional
        Start vertex.  If None, the unique vertex of in-degree 0 is used.

    Returns
    -------
    (E, L) : (list, int64 ndarray)
        ``E[k]`` is the vertex at step k of the traversal, ``L[k]`` its
        depth (root depth 0).  Both are empty for a graph with no vertices.

    Raises
    ------
    networkx.NodeNotFound
        If *root* is given but not in the graph.
    networkx.NetworkXError
        If the graph is not a single tree reachable from the root.

    Examples
    --------
    >>> E, L = euler_tour({0: [1, 2], 1: [3, 4]})
    >>> E
    [0, 1, 3, 1, 4, 1, 0, 2, 0]
    >>> L.tolist()
    [0, 1, 2, 1, 2, 1, 0, 1, 0]
    """
    graph = as_digraph(graph)
    if len(graph) == 0:
        return [], np.empty(0, dtype=np.int64)

    if root is None:
        root = find_root(graph)
    elif root not in graph:
        raise nx.NodeNotFound(f"The node {root} is not in the digraph.")

    tour = []
    levels = []
    depth = {}
    for u, v, direction in nx.dfs_labeled_edges(graph, source=root):
        if direction == "forward":
            depth[v] = 0 if u == v else depth[u] + 1
            tour.append(v)
            levels.append(depth[v])
        elif direction == "reverse":
            if u != v:
                tour.append(u)
                levels.append(depth[u])
        elif direction == "nontree":
            raise nx.NetworkXError(
                f"Edge ({u}, {v}) leads to an already visited vertex; "
                "LCA by Euler tour is only defined on trees."
            )

    if len(depth) != len(graph):
        raise nx.NetworkXError(
            f"{len(graph) - len(depth)} vertices are unreachable from root {root!r}."
        )

    levels = np.asarray(levels, dtype=np.int64)
    log_tour_statistics(len(depth), len(tour), int(levels.max()), root)
    return tour, levels
