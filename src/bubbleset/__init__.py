"""Bubble set overlays for animated bubble charts.

**bubbleset** draws a smooth region around every group of points in a chart
frame. Members of a group are connected by a minimum spanning tree, an energy
field is rasterized from the points and the tree edges, and the field's
iso-contour becomes the filled overlay.

Core Functions (Top-Level Exports)
----------------------------------
update_bubble_overlay : Redraw overlays for one frame, return a disposer
compute_group_polygons : Pure per-group pipeline, returns shapely polygons
BubbleSetConfig : Grid resolution, falloff radii and contour threshold

Submodule Organization
----------------------
ops : Spanning tree, energy field and contour primitives

    >>> from bubbleset.ops import minimum_spanning_tree, build_energy_field

overlay : Render surfaces and overlay lifecycle

    >>> from bubbleset.overlay import MatplotlibOverlaySurface

projection : Record to screen-space projection

    >>> from bubbleset.projection import project_points

Examples
--------
Draw overlays for one year of survey data::

    >>> import matplotlib.pyplot as plt
    >>> from bubbleset import update_bubble_overlay
    >>> fig, ax = plt.subplots()  # doctest: +SKIP
    >>> dispose = update_bubble_overlay(
    ...     records, x, y, 640, 480, ax,
    ...     group_key=lambda d: f"{d['execution_model']}-{d['memory_management']}",
    ... )  # doctest: +SKIP
    >>> dispose()  # doctest: +SKIP
"""

import logging

from bubbleset._types import Edge, Point
from bubbleset.config import BubbleSetConfig, GridSizeError
from bubbleset.overlay.manager import compute_group_polygons, update_bubble_overlay

# Add NullHandler to prevent "No handler found" warnings if user doesn't configure logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BubbleSetConfig",
    "Edge",
    "GridSizeError",
    "Point",
    "compute_group_polygons",
    "update_bubble_overlay",
]
