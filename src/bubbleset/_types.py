"""Core value types shared by the bubble set pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

__all__ = ["Edge", "Point", "as_point_array"]


class Point(NamedTuple):
    """Screen-space position of one group member."""

    x: float
    y: float


class Edge(NamedTuple):
    """Undirected spanning-tree edge between two points of the same group.

    Attributes
    ----------
    p, q : Point
        Edge endpoints. ``p`` is always the already-connected endpoint.
    source, target : int
        Input indices of ``p`` and ``q``.
    """

    p: Point
    q: Point
    source: int
    target: int

    @property
    def length(self) -> float:
        """Euclidean length of the edge."""
        return float(np.hypot(self.q.x - self.p.x, self.q.y - self.p.y))


def as_point_array(points: Sequence[Point] | ArrayLike) -> NDArray[np.float64]:
    """Convert points to a float64 array of shape (n_points, 2).

    Parameters
    ----------
    points : sequence of Point or array-like, shape (n_points, 2)
        Points to convert. An empty sequence is allowed.

    Returns
    -------
    NDArray[np.float64], shape (n_points, 2)

    Raises
    ------
    ValueError
        If the input cannot be interpreted as 2D points.
    """
    coords = np.asarray(points, dtype=np.float64)
    if coords.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError(
            f"points must have shape (n_points, 2), got {coords.shape}. "
            "Pass a sequence of (x, y) pairs."
        )
    return coords
