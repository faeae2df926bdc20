"""
Euclidean minimum spanning trees over small point sets.

The tree is used to bridge otherwise disjoint members of a group, so the
edge order and tie-breaking must be reproducible from frame to frame.

Examples
--------
>>> from bubbleset.ops.spanning_tree import minimum_spanning_tree
>>> edges = minimum_spanning_tree([(10, 10), (100, 10), (10, 100)])
>>> [(e.source, e.target) for e in edges]
[(0, 1), (0, 2)]
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike
from scipy.spatial.distance import cdist

from bubbleset._types import Edge, Point, as_point_array

__all__ = ["minimum_spanning_tree"]


def minimum_spanning_tree(points: Sequence[Point] | ArrayLike) -> list[Edge]:
    """Compute a Euclidean minimum spanning tree with Prim's algorithm.

    Parameters
    ----------
    points : sequence of Point or array-like, shape (n_points, 2)
        Points of a single group, in input order.

    Returns
    -------
    list[Edge]
        ``max(0, n_points - 1)`` edges in the order they were added. Each
        edge's ``p`` is the endpoint already in the tree.

    Notes
    -----
    The tree grows from the first input point. Every step scans all
    (visited, unvisited) pairs and adds the globally cheapest one, using
    squared distance as the weight. Ties go to the first pair in scan order:
    visited points in the order they joined the tree, unvisited points in
    input order. This makes the result a pure function of the input order.

    Each step is O(n**2), which is fine for the tens of points per group a
    chart frame holds. Duplicate coordinates give zero-length edges.
    """
    coords = as_point_array(points)
    n_points = coords.shape[0]
    if n_points <= 1:
        return []

    weights = cdist(coords, coords, metric="sqeuclidean")

    visited = [0]
    not_visited = list(range(1, n_points))
    edges: list[Edge] = []
    while not_visited:
        candidates = weights[np.ix_(visited, not_visited)]
        # argmin returns the first minimum in row-major order
        row, col = divmod(int(np.argmin(candidates)), len(not_visited))
        source = visited[row]
        target = not_visited.pop(col)
        edges.append(
            Edge(
                p=Point(*coords[source]),
                q=Point(*coords[target]),
                source=source,
                target=target,
            )
        )
        visited.append(target)

    return edges
