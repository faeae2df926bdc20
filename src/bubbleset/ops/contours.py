"""
Iso-contour extraction from energy grids.

Marching squares is delegated to :func:`skimage.measure.find_contours`. This
module adapts its output to the grid-index convention used by the rest of the
package and assembles rings into fillable polygons.

Coordinate convention
---------------------
Rings are returned as ``(x, y)`` vertices in grid-index space where cell
``(row, col)`` spans ``[col, col + 1] x [row, row + 1]``. Multiplying by the
grid resolution therefore gives pixel coordinates directly
(:func:`rings_to_screen`). scikit-image places sample ``(row, col)`` at the
integer point itself, so its output is shifted by half a cell.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient
from skimage import measure

from bubbleset.config import CONTOUR_THRESHOLD

__all__ = [
    "extract_contours",
    "is_closed",
    "rings_to_polygons",
    "rings_to_screen",
]


def _as_grid(
    values: ArrayLike, size: tuple[int, int] | None
) -> NDArray[np.float64]:
    grid = np.asarray(values, dtype=np.float64)
    if size is None:
        if grid.ndim != 2:
            raise ValueError(
                f"values must be 2-D when size is omitted (got shape {grid.shape}). "
                "Pass size=(cols, rows) for flattened grids."
            )
        return grid
    cols, rows = size
    if grid.size != cols * rows:
        raise ValueError(
            f"values has {grid.size} entries but size={size} needs {cols * rows}."
        )
    return grid.reshape(rows, cols)


def is_closed(ring: NDArray[np.float64]) -> bool:
    """Whether a ring ends where it starts."""
    return ring.shape[0] > 2 and bool(np.array_equal(ring[0], ring[-1]))


def _extent_ring(cols: int, rows: int) -> NDArray[np.float64]:
    return np.array(
        [[0.0, 0.0], [0.0, rows], [cols, rows], [cols, 0.0], [0.0, 0.0]]
    )


def extract_contours(
    values: ArrayLike,
    size: tuple[int, int] | None = None,
    threshold: float = CONTOUR_THRESHOLD,
    *,
    close_boundary: bool = False,
) -> list[NDArray[np.float64]]:
    """Extract the iso-lines of a grid at ``threshold``.

    Parameters
    ----------
    values : array-like
        Grid values, either flattened in row-major order (with ``size``) or
        as a 2-D ``(rows, cols)`` array.
    size : tuple[int, int] or None, default=None
        Grid dimensions as ``(cols, rows)``; required for flattened input.
    threshold : float, default=0.5
        Iso-level. Rings enclose the regions where values exceed it.
    close_boundary : bool, default=False
        If False, regions touching the grid edge give open contours that end
        on the boundary. If True, the grid is treated as surrounded by
        below-threshold values, so every ring is closed and clipped to the
        grid extent.

    Returns
    -------
    list[NDArray[np.float64]]
        Rings of shape ``(n_vertices, 2)`` in ``(x, y)`` grid-index
        coordinates. Closed rings repeat their first vertex at the end.
        Empty, all-zero or all-below-threshold grids give an empty list. A
        grid entirely above ``threshold`` gives one ring around its extent.
        Grids one cell wide or tall are supported; their open contours
        cross the strip from edge to edge.

    Raises
    ------
    ValueError
        If ``values`` does not match ``size``.

    Examples
    --------
    >>> import numpy as np
    >>> grid = np.zeros((5, 5))
    >>> grid[1:4, 1:4] = 1.0
    >>> rings = extract_contours(grid.ravel(), size=(5, 5))
    >>> len(rings)
    1
    >>> is_closed(rings[0])
    True
    >>> extract_contours(np.zeros(25), size=(5, 5))
    []
    """
    grid = _as_grid(values, size)
    if grid.size == 0 or not np.any(grid > threshold):
        return []

    rows, cols = grid.shape
    # (x, y) shift from scikit-image sample coordinates to cell corners
    offset = np.array([0.5, 0.5])
    if close_boundary:
        # Just below the level: crossings land on the padding samples, which
        # the clip below moves onto the grid edge.
        border = np.nextafter(threshold, -np.inf)
        grid = np.pad(grid, 1, mode="constant", constant_values=border)
        offset -= 1.0
    elif np.all(grid > threshold):
        return [_extent_ring(cols, rows)]
    else:
        # Marching squares needs two samples per axis. A one-cell strip is
        # duplicated so that its two samples sit on the strip's two edges.
        thin = np.array([cols, rows]) < 2
        if thin.any():
            grid = np.pad(grid, [(0, int(thin[1])), (0, int(thin[0]))], mode="edge")
            offset[thin] = 0.0

    contours = measure.find_contours(
        grid, level=threshold, fully_connected="high", positive_orientation="high"
    )

    rings = []
    for contour in contours:
        ring = contour[:, ::-1] + offset
        if close_boundary:
            np.clip(ring[:, 0], 0.0, cols, out=ring[:, 0])
            np.clip(ring[:, 1], 0.0, rows, out=ring[:, 1])
        rings.append(ring)
    return rings


def rings_to_screen(
    rings: list[NDArray[np.float64]], resolution: float
) -> list[NDArray[np.float64]]:
    """Scale grid-index rings to pixel coordinates."""
    return [ring * resolution for ring in rings]


def rings_to_polygons(rings: list[NDArray[np.float64]]) -> list[Polygon]:
    """Assemble rings into polygons with holes.

    Rings extracted at a single level never cross, so nesting depth decides
    their role: rings inside an even number of other rings are outer
    boundaries and rings at odd depth are holes of their innermost
    enclosing outer ring.

    Parameters
    ----------
    rings : list of NDArray[np.float64]
        Rings in any consistent coordinate space. Open rings are closed
        implicitly; rings with fewer than three distinct vertices are dropped.

    Returns
    -------
    list[Polygon]
        Oriented polygons (counter-clockwise exteriors, clockwise holes), in
        the order their outer rings were given.
    """
    shapes = []
    for ring in rings:
        if np.unique(ring, axis=0).shape[0] < 3:
            continue
        shell = Polygon(ring)
        if shell.area == 0.0:
            continue
        shapes.append((ring, shell))

    # a vertex lies on its own ring, never inside a sibling or a child
    probes = [ShapelyPoint(ring[0]) for ring, _ in shapes]
    parents: list[list[int]] = [
        [j for j, (_, other) in enumerate(shapes) if j != i and other.contains(probes[i])]
        for i in range(len(shapes))
    ]

    polygons = []
    for i, (ring, shell) in enumerate(shapes):
        depth = len(parents[i])
        if depth % 2 == 1:
            continue
        holes = [
            shapes[j][0]
            for j in range(len(shapes))
            if len(parents[j]) == depth + 1 and i in parents[j]
        ]
        polygons.append(orient(Polygon(ring, holes), sign=1.0))
    return polygons
