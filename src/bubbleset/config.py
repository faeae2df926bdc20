"""Tunable constants for bubble set construction.

The defaults give a 5 px grid, a 50 px point falloff, edges at half that
radius and a contour threshold of 0.5.

Examples
--------
>>> from bubbleset.config import BubbleSetConfig
>>> config = BubbleSetConfig()
>>> config.edge_radius
25.0
>>> config.replace(point_radius=80.0).edge_radius
40.0
"""

from __future__ import annotations

import dataclasses
import math
import numbers
import warnings
from dataclasses import dataclass

__all__ = [
    "CONTOUR_THRESHOLD",
    "DEFAULT_OPACITY",
    "EDGE_ENERGY_RADIUS",
    "GRID_RESOLUTION",
    "MAX_GRID_CELLS",
    "POINT_ENERGY_RADIUS",
    "STROKE_WIDTH",
    "BubbleSetConfig",
    "GridSizeError",
    "validate_opacity",
]

GRID_RESOLUTION = 5.0  # pixels per grid cell; lower is finer
POINT_ENERGY_RADIUS = 50.0
EDGE_ENERGY_RADIUS = POINT_ENERGY_RADIUS / 2
CONTOUR_THRESHOLD = 0.5
DEFAULT_OPACITY = 0.3
STROKE_WIDTH = 2.0
MAX_GRID_CELLS = 2_000_000


class GridSizeError(ValueError):
    """Raised when a chart would be rasterized into too many grid cells.

    Field construction is brute force over every cell, so very large charts
    combined with a fine resolution are refused instead of stalling a frame.
    Increase ``grid_resolution`` or ``max_grid_cells`` to proceed.
    """


def _require_positive(name: str, value: float) -> None:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number (got {type(value).__name__}).")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive and finite (got {value}).")


def validate_opacity(opacity: float) -> float:
    """Validate an overlay fill opacity.

    Parameters
    ----------
    opacity : float
        Fill opacity in [0, 1].

    Returns
    -------
    float
        The opacity as a float.

    Raises
    ------
    ValueError
        If opacity is outside [0, 1] or not finite.
    """
    opacity = float(opacity)
    if not math.isfinite(opacity) or not 0.0 <= opacity <= 1.0:
        raise ValueError(f"opacity must be in [0, 1] (got {opacity}).")
    return opacity


@dataclass(frozen=True)
class BubbleSetConfig:
    """Parameters of the energy field and contour extraction.

    Parameters
    ----------
    grid_resolution : float, default=5.0
        Size of one grid cell in pixels.
    point_radius : float, default=50.0
        Falloff radius of the energy deposited by each point, in pixels.
    edge_radius : float or None, default=None
        Falloff radius of spanning-tree edge samples. ``None`` means half of
        ``point_radius`` so that bridges read thinner than the blobs.
    threshold : float, default=0.5
        Energy level at which the contour is extracted. Must be positive, as
        an empty field has energy 0 everywhere.
    stroke_width : float, default=2.0
        Outline width of rendered overlays.
    max_grid_cells : int, default=2_000_000
        Upper bound on ``rows * cols`` of a single energy grid.

    Raises
    ------
    TypeError
        If a parameter is not numeric.
    ValueError
        If a parameter is not positive and finite.

    Warns
    -----
    UserWarning
        If an isolated point's footprint at ``threshold`` is smaller than one
        grid cell, in which case single points tend to produce no contour.
    """

    grid_resolution: float = GRID_RESOLUTION
    point_radius: float = POINT_ENERGY_RADIUS
    edge_radius: float | None = None
    threshold: float = CONTOUR_THRESHOLD
    stroke_width: float = STROKE_WIDTH
    max_grid_cells: int = MAX_GRID_CELLS

    def __post_init__(self) -> None:
        _require_positive("grid_resolution", self.grid_resolution)
        _require_positive("point_radius", self.point_radius)
        if self.edge_radius is None:
            object.__setattr__(self, "edge_radius", self.point_radius / 2)
        _require_positive("edge_radius", self.edge_radius)  # type: ignore[arg-type]
        _require_positive("threshold", self.threshold)
        _require_positive("stroke_width", self.stroke_width)
        _require_positive("max_grid_cells", self.max_grid_cells)

        footprint = self.point_radius * (1.0 - self.threshold)
        if footprint < self.grid_resolution:
            warnings.warn(
                f"A single point covers {max(footprint, 0.0):.3g} px above the "
                f"threshold, less than one grid cell ({self.grid_resolution} px). "
                "Isolated points will likely produce no overlay. Lower the "
                "threshold, increase point_radius or use a finer grid_resolution.",
                UserWarning,
                stacklevel=3,
            )

    def replace(self, **changes: float | int | None) -> BubbleSetConfig:
        """Return a validated copy with ``changes`` applied.

        ``edge_radius`` is re-derived from ``point_radius`` unless it is
        passed explicitly or was set explicitly before.
        """
        if "edge_radius" not in changes and "point_radius" in changes:
            if self.edge_radius == self.point_radius / 2:
                changes["edge_radius"] = None
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]
