"""
Energy fields for bubble set contours.

A group's energy field is a regular grid covering the whole chart. Every
member point deposits a linear (tent) falloff around itself, and every
spanning-tree edge deposits a thinner falloff along its length so that the
iso-contour stays connected between distant members.

All contributions are additive. Dense clusters legitimately exceed 1.0,
which is harmless because the field is only ever thresholded.

Examples
--------
>>> from bubbleset.ops.energy import build_energy_field
>>> field = build_energy_field([(50, 50)], [], width=100, height=100)
>>> field.shape
(20, 20)
>>> float(field.max()) > 0.9
True
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.distance import cdist

from bubbleset._types import Edge, Point, as_point_array
from bubbleset.config import (
    GRID_RESOLUTION,
    MAX_GRID_CELLS,
    POINT_ENERGY_RADIUS,
    GridSizeError,
)

__all__ = [
    "build_energy_field",
    "cell_centers",
    "grid_shape",
    "radial_falloff",
    "sample_edges",
]

logger = logging.getLogger(__name__)

# Number of energy sources evaluated per cdist call; bounds the
# (n_cells, chunk) distance matrix.
_SOURCE_CHUNK = 64


def grid_shape(
    width: float,
    height: float,
    resolution: float = GRID_RESOLUTION,
    *,
    max_cells: int | None = MAX_GRID_CELLS,
) -> tuple[int, int]:
    """Return the ``(rows, cols)`` shape of the grid covering a chart.

    Parameters
    ----------
    width, height : float
        Chart size in pixels. Must be positive.
    resolution : float, default=5.0
        Cell size in pixels.
    max_cells : int or None, default=2_000_000
        Maximum allowed ``rows * cols``. ``None`` disables the check.

    Returns
    -------
    tuple[int, int]
        ``(ceil(height / resolution), ceil(width / resolution))``.

    Raises
    ------
    ValueError
        If a dimension or the resolution is not positive and finite.
    GridSizeError
        If the grid would exceed ``max_cells``.

    Examples
    --------
    >>> grid_shape(640, 480, 5)
    (96, 128)
    >>> grid_shape(101, 99, 5)
    (20, 21)
    """
    for name, value in (("width", width), ("height", height), ("resolution", resolution)):
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be positive and finite (got {value}).")

    rows = math.ceil(height / resolution)
    cols = math.ceil(width / resolution)
    if max_cells is not None and rows * cols > max_cells:
        raise GridSizeError(
            f"A {width}x{height} px chart at resolution {resolution} px needs "
            f"{rows * cols} grid cells, more than max_cells={max_cells}. "
            "Use a coarser resolution or raise max_grid_cells."
        )
    return rows, cols


def cell_centers(shape: tuple[int, int], resolution: float) -> NDArray[np.float64]:
    """Pixel coordinates of every cell centre, in row-major order.

    Parameters
    ----------
    shape : tuple[int, int]
        Grid shape ``(rows, cols)``.
    resolution : float
        Cell size in pixels.

    Returns
    -------
    NDArray[np.float64], shape (rows * cols, 2)
        ``(x, y)`` of cell ``(row, col)`` is
        ``(col * resolution + resolution / 2, row * resolution + resolution / 2)``.
    """
    rows, cols = shape
    xs = np.arange(cols, dtype=np.float64) * resolution + resolution / 2
    ys = np.arange(rows, dtype=np.float64) * resolution + resolution / 2
    grid_x, grid_y = np.meshgrid(xs, ys)
    return np.column_stack([grid_x.ravel(), grid_y.ravel()])


def radial_falloff(
    centers: NDArray[np.float64],
    sources: NDArray[np.float64],
    radius: float,
) -> NDArray[np.float64]:
    """Sum of tent falloffs from ``sources`` evaluated at ``centers``.

    Each source contributes ``max(0, (radius - d) / radius)`` where ``d`` is
    its distance to the evaluation point.

    Parameters
    ----------
    centers : NDArray[np.float64], shape (n_centers, 2)
        Evaluation points.
    sources : NDArray[np.float64], shape (n_sources, 2)
        Energy sources.
    radius : float
        Falloff radius; contributions are zero at and beyond it.

    Returns
    -------
    NDArray[np.float64], shape (n_centers,)
    """
    energy = np.zeros(centers.shape[0], dtype=np.float64)
    for start in range(0, sources.shape[0], _SOURCE_CHUNK):
        distances = cdist(centers, sources[start : start + _SOURCE_CHUNK])
        energy += np.clip((radius - distances) / radius, 0.0, None).sum(axis=1)
    return energy


def sample_edges(
    edges: Sequence[Edge] | ArrayLike,
    step: float,
) -> NDArray[np.float64]:
    """Sample points along edges at intervals of at most ``step``.

    Parameters
    ----------
    edges : sequence of Edge or array-like, shape (n_edges, 2, 2)
        Segments as ``(p, q)`` endpoint pairs.
    step : float
        Maximum spacing between consecutive samples.

    Returns
    -------
    NDArray[np.float64], shape (n_samples, 2)
        For an edge of length ``L > 0``, ``n = ceil(L / step)`` intervals
        give ``n + 1`` samples including both endpoints. Zero-length edges
        produce no samples.

    Examples
    --------
    >>> sample_edges([((0, 0), (10, 0))], step=5)
    array([[ 0.,  0.],
           [ 5.,  0.],
           [10.,  0.]])
    """
    segments = [(tuple(edge[0]), tuple(edge[1])) for edge in edges]
    samples = []
    for p, q in segments:
        start = np.asarray(p, dtype=np.float64)
        delta = np.asarray(q, dtype=np.float64) - start
        length = float(np.hypot(*delta))
        if length == 0.0:
            continue
        n_intervals = math.ceil(length / step)
        t = np.arange(n_intervals + 1, dtype=np.float64) / n_intervals
        samples.append(start + t[:, np.newaxis] * delta)

    if not samples:
        return np.empty((0, 2), dtype=np.float64)
    return np.concatenate(samples)


def build_energy_field(
    points: Sequence[Point] | ArrayLike,
    edges: Sequence[Edge],
    width: float,
    height: float,
    *,
    resolution: float = GRID_RESOLUTION,
    point_radius: float = POINT_ENERGY_RADIUS,
    edge_radius: float | None = None,
    max_cells: int | None = MAX_GRID_CELLS,
) -> NDArray[np.float64]:
    """Rasterize a group's energy field over the chart area.

    Parameters
    ----------
    points : sequence of Point or array-like, shape (n_points, 2)
        Screen-space positions of the group members.
    edges : sequence of Edge
        Spanning-tree edges of the group, see
        :func:`bubbleset.ops.spanning_tree.minimum_spanning_tree`.
    width, height : float
        Chart size in pixels.
    resolution : float, default=5.0
        Cell size in pixels.
    point_radius : float, default=50.0
        Falloff radius of point contributions.
    edge_radius : float or None, default=None
        Falloff radius of edge samples; ``None`` means ``point_radius / 2``.
    max_cells : int or None, default=2_000_000
        Refuse grids with more cells than this.

    Returns
    -------
    NDArray[np.float64], shape (rows, cols)
        Energy per cell, ``rows = ceil(height / resolution)`` and
        ``cols = ceil(width / resolution)``.

    Raises
    ------
    ValueError
        If the chart size, resolution or radii are not positive.
    GridSizeError
        If the grid would exceed ``max_cells``.

    Notes
    -----
    Cost is O((n_points + n_edge_samples) * n_cells). Every source is
    evaluated against every cell; there is no spatial index.
    """
    if edge_radius is None:
        edge_radius = point_radius / 2
    for name, value in (("point_radius", point_radius), ("edge_radius", edge_radius)):
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be positive and finite (got {value}).")

    shape = grid_shape(width, height, resolution, max_cells=max_cells)
    centers = cell_centers(shape, resolution)
    coords = as_point_array(points)

    energy = radial_falloff(centers, coords, point_radius)
    edge_samples = sample_edges(edges, resolution)
    if edge_samples.shape[0] > 0:
        energy += radial_falloff(centers, edge_samples, edge_radius)

    logger.debug(
        "Energy field %s from %d points and %d edge samples (max %.3f)",
        shape,
        coords.shape[0],
        edge_samples.shape[0],
        float(energy.max()) if energy.size else 0.0,
    )
    return energy.reshape(shape)
