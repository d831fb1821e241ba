"""Vector backend — connector regions as Shapely polygons.

Builds the same regions as ``region.py`` with boolean geometry instead of
distances: a box for horizontals; for diagonals the four-center box minus
the inner discs of the endpoints and the outer discs of the flanks.
"""

from __future__ import annotations

import logging

from shapely.geometry import Point, Polygon, box
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from dotgrid.engine.config import CircleRadii
from dotgrid.engine.links import ConnectorInstance, ConnectorKind

logger = logging.getLogger(__name__)


def _disc(center, radius: float, resolution: int) -> BaseGeometry:
    return Point(float(center[0]), float(center[1])).buffer(radius, quad_segs=resolution)


def connector_geometry(
    instance: ConnectorInstance,
    radii: CircleRadii,
    resolution: int = 16,
) -> BaseGeometry:
    """Fill region of one connector; empty Polygon when degenerate."""
    if instance.kind is ConnectorKind.HORIZONTAL:
        if radii.inner <= 0:
            return Polygon()
        xmin, ymin, xmax, ymax = instance.bounds(radii.inner)
        return box(xmin, ymin, xmax, ymax)

    if radii.inner >= radii.outer:
        return Polygon()

    xmin, ymin, xmax, ymax = instance.bounds(radii.inner)
    region = box(xmin, ymin, xmax, ymax)
    c, d = instance.flank_centers
    cuts = [
        _disc(instance.center_a, radii.inner, resolution),
        _disc(instance.center_b, radii.inner, resolution),
        _disc(c, radii.outer, resolution),
        _disc(d, radii.outer, resolution),
    ]
    return region.difference(unary_union([g for g in cuts if not g.is_empty]))


def union_geometry(
    instances: list[ConnectorInstance],
    radii: CircleRadii,
    resolution: int = 16,
) -> BaseGeometry:
    """All connector regions merged into one geometry."""
    parts = [connector_geometry(inst, radii, resolution) for inst in instances]
    parts = [p for p in parts if not p.is_empty]
    if not parts:
        return Polygon()
    merged = unary_union(parts)
    logger.debug("Merged %d connector polygons (area %.4f)", len(parts), merged.area)
    return merged


def circle_geometry(center, radius: float, resolution: int = 16) -> BaseGeometry:
    if radius <= 0:
        return Polygon()
    return _disc(center, radius, resolution)
