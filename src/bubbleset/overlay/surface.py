"""Render surfaces for bubble set overlays.

The overlay manager never keeps references to what it drew. Every rendered
path carries a set of string tags, and later calls locate geometry through
those tags on the surface itself, the way CSS classes are used on an SVG.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np
from matplotlib.colors import to_rgba
from matplotlib.patches import PathPatch
from matplotlib.path import Path as MplPath

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from shapely.geometry import Polygon

__all__ = ["OVERLAY_ZORDER", "MatplotlibOverlaySurface", "OverlaySurface", "polygon_path"]

# Above images and gridlines, below scatter markers (zorder 1 is patches).
OVERLAY_ZORDER = 0.5


@runtime_checkable
class OverlaySurface(Protocol):
    """Interface the overlay manager draws on."""

    def add_overlay(
        self,
        tags: Sequence[str],
        polygon: Polygon,
        *,
        color: Any,
        opacity: float,
        stroke_width: float,
    ) -> Any:
        """Draw a filled, outlined polygon tagged with ``tags``."""
        ...

    def remove_overlays(self, tag: str) -> int:
        """Remove every overlay carrying ``tag`` and return how many were removed."""
        ...

    def overlay_tags(self) -> list[set[str]]:
        """Tag sets of all overlays currently on the surface."""
        ...


def polygon_path(polygon: Polygon) -> MplPath:
    """Convert a shapely polygon (with holes) into a compound matplotlib path.

    Holes are emitted as extra closed sub-paths. Matplotlib fills with the
    non-zero winding rule, so they must wind opposite to the exterior, as
    :func:`shapely.geometry.polygon.orient` guarantees.
    """
    rings = [polygon.exterior, *polygon.interiors]
    return MplPath.make_compound_path(
        *(MplPath(np.asarray(ring.coords), closed=True) for ring in rings)
    )


class MatplotlibOverlaySurface:
    """Overlay surface backed by a matplotlib ``Axes``.

    Each overlay is a :class:`~matplotlib.patches.PathPatch` whose ``gid``
    holds its space-separated tags. The axes are the only store of state, so
    several surface objects wrapping the same axes see the same overlays.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axes in pixel data coordinates (as produced by the chart layer).
    zorder : float, default=0.5
        Drawing order of overlay patches.

    Examples
    --------
    >>> import matplotlib
    >>> matplotlib.use("Agg")
    >>> import matplotlib.pyplot as plt
    >>> from shapely.geometry import box
    >>> fig, ax = plt.subplots()
    >>> surface = MatplotlibOverlaySurface(ax)
    >>> _ = surface.add_overlay(["bubble-overlay", "bubble-overlay-a"], box(0, 0, 1, 1),
    ...                         color="tab:blue", opacity=0.3, stroke_width=2.0)
    >>> surface.remove_overlays("bubble-overlay-a")
    1
    """

    def __init__(self, ax: Axes, *, zorder: float = OVERLAY_ZORDER) -> None:
        self.ax = ax
        self.zorder = zorder

    def add_overlay(
        self,
        tags: Sequence[str],
        polygon: Polygon,
        *,
        color: Any,
        opacity: float,
        stroke_width: float,
    ) -> PathPatch:
        patch = PathPatch(
            polygon_path(polygon),
            facecolor=to_rgba(color, opacity),
            edgecolor=to_rgba(color),
            linewidth=stroke_width,
            zorder=self.zorder,
        )
        patch.set_gid(" ".join(tags))
        self.ax.add_patch(patch)
        return patch

    def _tagged_patches(self, tag: str) -> list[Any]:
        return [
            patch
            for patch in self.ax.patches
            if patch.get_gid() and tag in patch.get_gid().split()
        ]

    def remove_overlays(self, tag: str) -> int:
        patches = self._tagged_patches(tag)
        for patch in patches:
            patch.remove()
        return len(patches)

    def overlay_tags(self) -> list[set[str]]:
        return [set(patch.get_gid().split()) for patch in self.ax.patches if patch.get_gid()]
