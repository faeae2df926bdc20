"""Overlay rendering and per-frame lifecycle."""

from bubbleset.overlay.manager import (
    DEFAULT_GROUP,
    OVERLAY_CLASS,
    compute_group_polygons,
    default_color_lookup,
    group_records,
    overlay_class,
    sanitize_key,
    update_bubble_overlay,
)
from bubbleset.overlay.surface import (
    MatplotlibOverlaySurface,
    OverlaySurface,
    polygon_path,
)

__all__ = [
    "DEFAULT_GROUP",
    "OVERLAY_CLASS",
    "MatplotlibOverlaySurface",
    "OverlaySurface",
    "compute_group_polygons",
    "default_color_lookup",
    "group_records",
    "overlay_class",
    "polygon_path",
    "sanitize_key",
    "update_bubble_overlay",
]
