"""Connector region predicate — the single implementation every backend uses.

SDF convention: negative inside the fill region, positive outside; a point
is filled when ``sdf < 0``. Constraints combine with ``max`` (intersection).
The boolean test is strict, so boundary points are outside: a horizontal
connector does not contain its own endpoint centers, and the closed box
intervals below only bound the region. With anti-aliasing a boundary pixel
gets coverage 0.5.

Horizontal connector (A left, B right):
    box spanning x ∈ [A.x, B.x], y ∈ [mid.y - r, mid.y + r]

Diagonal connector (A, B opposite corners of a 2×2 block; C, D the flanks):
    a. outside the inner circles of A and B       r - |p - A|, r - |p - B|
    b. outside the outer circles of C and D       R - |p - C|, R - |p - D|
    c. inside the box spanned by the four centers sd_box
    plus the annulus term r - R, which empties the region when r >= R and
    never changes the sign otherwise.

Nothing here validates or clamps radii.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dotgrid.engine.config import CircleRadii
from dotgrid.engine.links import ConnectorInstance, ConnectorKind
from dotgrid.engine.sdf import as_points, distance, op_intersection, sd_box, smoothstep


def horizontal_sdf(
    points: ArrayLike,
    a: ArrayLike,
    b: ArrayLike,
    inner_radius: float,
) -> NDArray[np.float64]:
    """Constant-width band between two centers on the same row."""
    pts = as_points(points)
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    mid = (a + b) * 0.5
    half_w = np.abs(b[..., 0] - a[..., 0]) * 0.5
    half = np.stack(np.broadcast_arrays(half_w, np.asarray(inner_radius, dtype=np.float64)), axis=-1)
    return sd_box(pts, mid, half)


def diagonal_sdf(
    points: ArrayLike,
    a: ArrayLike,
    b: ArrayLike,
    c: ArrayLike,
    d: ArrayLike,
    inner_radius: float,
    outer_radius: float,
) -> NDArray[np.float64]:
    """Diagonal connector between ``a`` and ``b`` bounded away from flanks ``c``/``d``."""
    pts = as_points(points)
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64)
    d = np.asarray(d, dtype=np.float64)

    lo = np.minimum(np.minimum(a, b), np.minimum(c, d))
    hi = np.maximum(np.maximum(a, b), np.maximum(c, d))
    box = sd_box(pts, (lo + hi) * 0.5, (hi - lo) * 0.5)

    return op_intersection(
        inner_radius - distance(pts, a),
        inner_radius - distance(pts, b),
        outer_radius - distance(pts, c),
        outer_radius - distance(pts, d),
        box,
        np.full(pts.shape[:-1], inner_radius - outer_radius),
    )


def connector_sdf(points: ArrayLike, instance: ConnectorInstance, radii: CircleRadii) -> NDArray[np.float64]:
    """Signed distance to one connector instance's fill region."""
    if instance.kind is ConnectorKind.HORIZONTAL:
        return horizontal_sdf(points, instance.center_a, instance.center_b, radii.inner)
    c, d = instance.flank_centers
    return diagonal_sdf(points, instance.center_a, instance.center_b, c, d, radii.inner, radii.outer)


def contains(points: ArrayLike, instance: ConnectorInstance, radii: CircleRadii) -> NDArray[np.bool_] | bool:
    """True where a point lies inside the connector. Scalar in, scalar out."""
    inside = connector_sdf(points, instance, radii) < 0.0
    if inside.ndim == 0:
        return bool(inside)
    return inside


def coverage_from_sdf(sdf: NDArray[np.float64], band: float) -> NDArray[np.float64]:
    """Anti-aliased coverage in [0, 1], ramping across ``band`` centered on the edge.

    ``band == 0`` gives a hard mask identical to ``sdf < 0``.
    """
    sdf = np.asarray(sdf, dtype=np.float64)
    if band <= 0:
        return (sdf < 0.0).astype(np.float64)
    half = band * 0.5
    return smoothstep(half, -half, sdf)
