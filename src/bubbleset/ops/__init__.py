"""
Numerical building blocks of bubble set construction.

Submodules
----------
spanning_tree : Deterministic Euclidean minimum spanning tree (Prim)
energy : Point and edge energy fields on a regular grid
contours : Iso-contour extraction and polygon assembly
"""

from bubbleset.ops.contours import (
    extract_contours,
    is_closed,
    rings_to_polygons,
    rings_to_screen,
)
from bubbleset.ops.energy import (
    build_energy_field,
    cell_centers,
    grid_shape,
    radial_falloff,
    sample_edges,
)
from bubbleset.ops.spanning_tree import minimum_spanning_tree

# ruff: noqa: RUF022  - Intentionally organized into groups with comments
__all__ = [
    # Spanning tree
    "minimum_spanning_tree",
    # Energy
    "build_energy_field",
    "cell_centers",
    "grid_shape",
    "radial_falloff",
    "sample_edges",
    # Contours
    "extract_contours",
    "is_closed",
    "rings_to_polygons",
    "rings_to_screen",
]
