"""Polygon and landmark-ring geometry.

Pure functions over pixel coordinates. Polygons are ordered (N, 2)
vertex sequences; anything with fewer than three vertices is treated
as empty rather than rejected.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

# Iris radius assumed when a ring has no boundary points
DEFAULT_RING_RADIUS = 10.0


def _as_polygon(polygon) -> Optional[np.ndarray]:
    if polygon is None:
        return None
    poly = np.asarray(polygon, dtype=np.float64)
    if poly.ndim != 2 or poly.shape[0] < 3 or poly.shape[1] < 2:
        return None
    return poly[:, :2]


def point_in_polygon(x: float, y: float, polygon) -> bool:
    """Even-odd ray casting containment test.

    An edge counts as crossed when it straddles the horizontal line
    through ``y`` (half-open in y) and the crossing lies strictly to the
    right of ``x``. Degenerate polygons never contain anything.
    """
    poly = _as_polygon(polygon)
    if poly is None:
        return False

    inside = False
    n = len(poly)
    j = n - 1
    for i in range(n):
        xi, yi = poly[i]
        xj, yj = poly[j]
        if (yi > y) != (yj > y):
            if x < (xj - xi) * (y - yi) / (yj - yi) + xi:
                inside = not inside
        j = i
    return inside


def points_in_polygon(xs: np.ndarray, ys: np.ndarray, polygon) -> np.ndarray:
    """Vectorized :func:`point_in_polygon` over coordinate arrays.

    Args:
        xs: X coordinates, any shape.
        ys: Y coordinates, same shape as ``xs``.
        polygon: Ordered vertices.

    Returns:
        Boolean array with the shape of ``xs``.
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    inside = np.zeros(xs.shape, dtype=bool)
    poly = _as_polygon(polygon)
    if poly is None:
        return inside

    n = len(poly)
    j = n - 1
    for i in range(n):
        xi, yi = poly[i]
        xj, yj = poly[j]
        j = i
        straddles = (yi > ys) != (yj > ys)
        if not straddles.any():
            continue
        # yj != yi wherever straddles holds
        with np.errstate(divide="ignore", invalid="ignore"):
            x_cross = (xj - xi) * (ys - yi) / (yj - yi) + xi
        inside ^= straddles & (xs < x_cross)
    return inside


def estimate_ring_radius(points, default: float = DEFAULT_RING_RADIUS) -> float:
    """Mean distance from ``points[0]`` (the ring center) to the rest."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < 2:
        return default
    center = pts[0, :2]
    dists = np.hypot(pts[1:, 0] - center[0], pts[1:, 1] - center[1])
    return float(dists.mean())


def polygon_bounds(polygon, width: int, height: int) -> Optional[Tuple[int, int, int, int]]:
    """Integer (min_x, min_y, max_x, max_y) of a polygon clamped to the image.

    Returns None for an empty polygon.
    """
    pts = np.asarray(polygon, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] == 0:
        return None
    min_x = max(0, int(math.floor(pts[:, 0].min())))
    min_y = max(0, int(math.floor(pts[:, 1].min())))
    max_x = min(width - 1, int(math.ceil(pts[:, 0].max())))
    max_y = min(height - 1, int(math.ceil(pts[:, 1].max())))
    return min_x, min_y, max_x, max_y


def scale_polygon(polygon, factor: float) -> np.ndarray:
    """Scale vertices toward (factor < 1) or away from their mean."""
    pts = np.asarray(polygon, dtype=np.float64)[:, :2]
    center = pts.mean(axis=0)
    return center + (pts - center) * factor


def ellipse_polygon(
    cx: float, cy: float, rx: float, ry: float, step_deg: float = 10.0
) -> np.ndarray:
    """Approximate an axis-aligned ellipse with one vertex per ``step_deg``."""
    angles = np.radians(np.arange(0.0, 360.0, step_deg))
    return np.stack([cx + rx * np.cos(angles), cy + ry * np.sin(angles)], axis=1)


def circle_polygon(cx: float, cy: float, radius: float, step_deg: float = 20.0) -> np.ndarray:
    return ellipse_polygon(cx, cy, radius, radius, step_deg)


def eyelid_polygon(upper: Sequence, lower: Sequence) -> np.ndarray:
    """Close an eye outline from upper and lower lid contours."""
    up = np.asarray(upper, dtype=np.float64)[:, :2]
    low = np.asarray(lower, dtype=np.float64)[::-1, :2]
    return np.concatenate([up, low], axis=0)


def round_half_up(values) -> np.ndarray:
    """Round to the nearest integer with .5 going up, as pixel snapping expects."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


__all__ = [
    "DEFAULT_RING_RADIUS",
    "point_in_polygon",
    "points_in_polygon",
    "estimate_ring_radius",
    "polygon_bounds",
    "scale_polygon",
    "ellipse_polygon",
    "circle_polygon",
    "eyelid_polygon",
    "round_half_up",
]
