"""2D signed distance primitives. Negative inside, positive outside.

Every function takes points as an ``(..., 2)`` array; shape parameters
broadcast against the leading dimensions, so a caller can pass one center
for all points or one center per point.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray


def as_points(points: ArrayLike) -> NDArray[np.float64]:
    """Coerce to a float64 ``(..., 2)`` array."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[-1:] != (2,):
        raise ValueError(f"Expected (..., 2) points, got shape {pts.shape}")
    return pts


def distance(points: NDArray[np.float64], center: ArrayLike) -> NDArray[np.float64]:
    """Euclidean distance from each point to ``center``."""
    d = points - np.asarray(center, dtype=np.float64)
    return np.hypot(d[..., 0], d[..., 1])


def sd_circle(points: NDArray[np.float64], center: ArrayLike, radius: ArrayLike) -> NDArray[np.float64]:
    return distance(points, center) - np.asarray(radius, dtype=np.float64)


def sd_box(points: NDArray[np.float64], center: ArrayLike, half_size: ArrayLike) -> NDArray[np.float64]:
    """Axis-aligned box with exact outside distance."""
    d = np.abs(points - np.asarray(center, dtype=np.float64)) - np.asarray(half_size, dtype=np.float64)
    outside = np.hypot(np.maximum(d[..., 0], 0.0), np.maximum(d[..., 1], 0.0))
    inside = np.minimum(np.maximum(d[..., 0], d[..., 1]), 0.0)
    return outside + inside


def op_union(*sdfs: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.minimum.reduce(np.broadcast_arrays(*sdfs))


def op_intersection(*sdfs: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.maximum.reduce(np.broadcast_arrays(*sdfs))


def op_subtraction(base: NDArray[np.float64], cut: NDArray[np.float64]) -> NDArray[np.float64]:
    """``base`` with ``cut`` removed."""
    return np.maximum(base, -cut)


def smoothstep(edge0: float, edge1: float, x: NDArray[np.float64]) -> NDArray[np.float64]:
    """GLSL smoothstep; ``edge0 > edge1`` gives a falling ramp."""
    if edge0 == edge1:
        return np.where(x < edge0, 0.0, 1.0)
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)
