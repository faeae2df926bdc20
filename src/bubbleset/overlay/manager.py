"""Per-frame lifecycle of bubble set overlays.

:func:`update_bubble_overlay` is called once per animation frame or filter
change. It clears the previous overlays, recomputes one region per group and
returns a callback that removes what it drew. Nothing is cached between
calls; the surface's tags are the only shared state.

Based on F2-Bubbles: Faithful Bubble Set Construction and Flexible Editing
(https://ieeexplore.ieee.org/document/9552179/).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from matplotlib import colormaps
from matplotlib.colors import to_hex
from numpy.typing import ArrayLike

from bubbleset._types import as_point_array
from bubbleset.config import DEFAULT_OPACITY, BubbleSetConfig, validate_opacity
from bubbleset.ops.contours import extract_contours, rings_to_polygons, rings_to_screen
from bubbleset.ops.energy import build_energy_field, grid_shape
from bubbleset.ops.spanning_tree import minimum_spanning_tree
from bubbleset.overlay.surface import MatplotlibOverlaySurface, OverlaySurface
from bubbleset.projection import Scale, project_points

if TYPE_CHECKING:
    from shapely.geometry import Polygon

__all__ = [
    "DEFAULT_GROUP",
    "OVERLAY_CLASS",
    "compute_group_polygons",
    "default_color_lookup",
    "group_records",
    "overlay_class",
    "sanitize_key",
    "update_bubble_overlay",
]

logger = logging.getLogger(__name__)

OVERLAY_CLASS = "bubble-overlay"
DEFAULT_GROUP = "default"

_UNSAFE_CHARS = re.compile(r"[^\w-]")


def sanitize_key(key: Any) -> str:
    """Make a group key usable as a CSS-style identifier.

    Examples
    --------
    >>> sanitize_key("compiled-manual")
    'compiled-manual'
    >>> sanitize_key("JIT / GC")
    'JIT___GC'
    """
    return _UNSAFE_CHARS.sub("_", str(key))


def overlay_class(key: Any) -> str:
    """Tag identifying the overlays of one group."""
    return f"{OVERLAY_CLASS}-{sanitize_key(key)}"


def group_records(
    records: Iterable[Any], group_key: Callable[[Any], Hashable] | None = None
) -> dict[Hashable, list[Any]]:
    """Partition records by key, ordered by first appearance.

    Parameters
    ----------
    records : iterable
        Records of one frame.
    group_key : callable or None, default=None
        Key function. ``None`` puts every record in the ``"default"`` group.

    Returns
    -------
    dict
        Key to records, preserving input order within and across groups.
    """
    groups: dict[Hashable, list[Any]] = {}
    for record in records:
        key = group_key(record) if group_key is not None else DEFAULT_GROUP
        groups.setdefault(key, []).append(record)
    return groups


def default_color_lookup(palette: str = "tab10") -> Callable[[Any], str]:
    """Ordinal colour lookup cycling through a categorical palette.

    Keys get colours in the order they are first requested, like d3's
    ``scaleOrdinal(schemeCategory10)`` (matplotlib's ``tab10`` is the same
    palette).
    """
    colors = [to_hex(color) for color in colormaps[palette].colors]
    assigned: dict[Any, str] = {}

    def lookup(key: Any) -> str:
        if key not in assigned:
            assigned[key] = colors[len(assigned) % len(colors)]
        return assigned[key]

    return lookup


def compute_group_polygons(
    points: ArrayLike,
    width: float,
    height: float,
    config: BubbleSetConfig | None = None,
) -> list[Polygon]:
    """Compute the screen-space bubble set region of one group.

    Parameters
    ----------
    points : array-like, shape (n_points, 2)
        Screen-space positions of the group members.
    width, height : float
        Chart size in pixels.
    config : BubbleSetConfig or None, default=None
        Field and contour parameters; defaults when None.

    Returns
    -------
    list[Polygon]
        Filled regions in pixel coordinates, possibly with holes. Empty if
        the group has no points or its field never exceeds the threshold.
    """
    config = config if config is not None else BubbleSetConfig()
    coords = as_point_array(points)
    if coords.shape[0] == 0:
        return []

    edges = minimum_spanning_tree(coords)
    rows, cols = grid_shape(
        width, height, config.grid_resolution, max_cells=config.max_grid_cells
    )
    field = build_energy_field(
        coords,
        edges,
        width,
        height,
        resolution=config.grid_resolution,
        point_radius=config.point_radius,
        edge_radius=config.edge_radius,
        max_cells=config.max_grid_cells,
    )
    rings = extract_contours(
        field.ravel(), (cols, rows), config.threshold, close_boundary=True
    )
    polygons = rings_to_polygons(rings_to_screen(rings, config.grid_resolution))
    logger.debug(
        "Group with %d points: %d edges, %d rings, %d polygons",
        coords.shape[0],
        len(edges),
        len(rings),
        len(polygons),
    )
    return polygons


def _as_surface(surface: Any) -> OverlaySurface:
    if isinstance(surface, OverlaySurface):
        return surface
    if hasattr(surface, "add_patch"):
        return MatplotlibOverlaySurface(surface)
    raise TypeError(
        "surface must be a matplotlib Axes or implement OverlaySurface "
        f"(got {type(surface).__name__})."
    )


def update_bubble_overlay(
    data: Sequence[Any],
    x: Scale,
    y: Scale,
    width: float,
    height: float,
    surface: Any,
    group_key: Callable[[Any], Hashable] | None = None,
    color: Callable[[Any], Any] | None = None,
    opacity: float = DEFAULT_OPACITY,
    *,
    config: BubbleSetConfig | None = None,
    x_field: str = "used",
    y_field: str = "interested",
) -> Callable[[], None]:
    """Redraw the bubble set overlays for one frame.

    Parameters
    ----------
    data : sequence
        Records of the current frame (e.g. one survey year).
    x, y : callable
        Coordinate mapping functions from data values to pixels.
    width, height : float
        Chart size in pixels.
    surface : matplotlib.axes.Axes or OverlaySurface
        Where overlays are drawn. Axes are wrapped in
        :class:`~bubbleset.overlay.surface.MatplotlibOverlaySurface`.
    group_key : callable or None, default=None
        Group key of a record, e.g.
        ``lambda d: f"{d['execution_model']}-{d['memory_management']}"``.
        None puts all records in one group.
    color : callable or None, default=None
        Colour of a group key. Defaults to :func:`default_color_lookup`
        applied to the sanitised key.
    opacity : float, default=0.3
        Fill opacity of the overlays.
    config : BubbleSetConfig or None, default=None
        Field and contour parameters.
    x_field, y_field : str
        Record fields mapped by ``x`` and ``y``.

    Returns
    -------
    callable
        Removes every overlay drawn by this call. Calling it more than once
        is harmless.

    Raises
    ------
    ValueError
        If ``opacity`` is outside [0, 1] or the chart size is invalid.
    GridSizeError
        If the chart exceeds ``config.max_grid_cells``.

    Notes
    -----
    All overlays tagged ``bubble-overlay`` are removed first, so the surface
    always shows exactly the groups of the latest call. Each group's geometry
    is computed completely before any of it is drawn.
    """
    config = config if config is not None else BubbleSetConfig()
    opacity = validate_opacity(opacity)
    target = _as_surface(surface)
    default_colors = default_color_lookup()

    removed = target.remove_overlays(OVERLAY_CLASS)
    groups = group_records(data, group_key)
    logger.debug("Removed %d stale overlays; drawing %d groups", removed, len(groups))

    rendered: list[str] = []
    for key, records in groups.items():
        tag = overlay_class(key)
        rendered.append(tag)

        points = project_points(records, x, y, x_field=x_field, y_field=y_field)
        polygons = compute_group_polygons(points, width, height, config)
        if not polygons:
            logger.debug("Group %r produced no contour", key)
            continue

        if color is not None:
            group_color = color(key)
        else:
            group_color = default_colors(sanitize_key(key))
        for polygon in polygons:
            target.add_overlay(
                [OVERLAY_CLASS, tag],
                polygon,
                color=group_color,
                opacity=opacity,
                stroke_width=config.stroke_width,
            )

    def dispose() -> None:
        for tag in rendered:
            target.remove_overlays(tag)

    return dispose
