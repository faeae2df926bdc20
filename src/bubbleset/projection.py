"""Map survey records to screen-space points.

The chart layer owns the coordinate mapping (typically logarithmic scales);
this module only clamps raw values into the mapped domain and applies the
mapping functions it is given.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import numpy as np
from numpy.typing import NDArray

__all__ = ["MIN_VALUE", "clamp_value", "project_points", "record_value"]

MIN_VALUE = 1e-3

Scale = Callable[[float], float]


def clamp_value(value: float, lo: float = MIN_VALUE, hi: float = 1.0) -> float:
    """Clamp ``value`` into ``[lo, hi]``.

    Examples
    --------
    >>> clamp_value(0.0)
    0.001
    >>> clamp_value(0.25)
    0.25
    >>> clamp_value(3.0)
    1.0
    """
    if lo > hi:
        raise ValueError(f"lo must be less than or equal to hi (got lo={lo}, hi={hi}).")
    return min(max(float(value), lo), hi)


def record_value(record: Any, field: str) -> Any:
    """Read ``field`` from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record[field]
    return getattr(record, field)


def project_points(
    records: Iterable[Any],
    x_scale: Scale,
    y_scale: Scale,
    *,
    x_field: str = "used",
    y_field: str = "interested",
    domain: tuple[float, float] = (MIN_VALUE, 1.0),
) -> NDArray[np.float64]:
    """Project records to screen-space coordinates.

    Parameters
    ----------
    records : iterable
        Records (mappings or objects) carrying ``x_field`` and ``y_field``.
    x_scale, y_scale : callable
        Mapping functions from data values to pixels, already configured by
        the chart layer.
    x_field, y_field : str
        Names of the fields mapped to the horizontal and vertical axes.
    domain : tuple of float, default=(MIN_VALUE, 1.0)
        Values are clamped into this range before mapping, so that
        logarithmic scales never see zero.

    Returns
    -------
    NDArray[np.float64], shape (n_records, 2)
        Projected (x, y) positions in input order.

    Examples
    --------
    >>> records = [{"used": 0.5, "interested": 0.0}]
    >>> project_points(records, lambda v: v * 100, lambda v: 100 - v * 100)
    array([[50. , 99.9]])
    """
    lo, hi = domain
    coords = [
        (
            x_scale(clamp_value(record_value(record, x_field), lo, hi)),
            y_scale(clamp_value(record_value(record, y_field), lo, hi)),
        )
        for record in records
    ]
    if not coords:
        return np.empty((0, 2), dtype=np.float64)
    return np.asarray(coords, dtype=np.float64)
