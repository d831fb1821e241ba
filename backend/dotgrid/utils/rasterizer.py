"""Rasterization utilities — painter's compositing, PNG encoding, text grids,
and Shapely polygon fill onto a pixel grid.

Image row 0 is the smallest world y, which is also the top row of a PNG or
SVG: world y grows downwards on screen, so ``\\`` connectors (row + 1) go
down-right as drawn.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from PIL import Image

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from dotgrid.engine.compositor import PixelGrid

# Coverage at or above this reads as "filled" in text previews.
_TEXT_FILL_THRESHOLD = 0.5

# 8-bit channel range for PNG output.
_CHANNEL_MAX = 255


def paint_over(
    image: NDArray[np.float64],
    coverage: NDArray[np.float64],
    color: tuple[float, float, float, float],
) -> None:
    """Paint ``color`` onto a straight-alpha RGBA image in place (Porter-Duff over)."""
    src_a = coverage * color[3]
    dst_a = image[..., 3]
    out_a = src_a + dst_a * (1.0 - src_a)
    src_rgb = np.asarray(color[:3], dtype=np.float64)
    weighted = src_rgb * src_a[..., None] + image[..., :3] * (dst_a * (1.0 - src_a))[..., None]
    safe = np.where(out_a > 0, out_a, 1.0)[..., None]
    image[..., :3] = np.where(out_a[..., None] > 0, weighted / safe, image[..., :3])
    image[..., 3] = out_a


def image_to_png(image: NDArray[np.float64]) -> bytes:
    """Encode an (ny, nx, 4) float RGBA image as PNG bytes."""
    pixels = np.clip(np.round(image * _CHANNEL_MAX), 0, _CHANNEL_MAX).astype(np.uint8)
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


def coverage_to_png(coverage: NDArray[np.float64]) -> bytes:
    """Encode a coverage mask as an 8-bit grayscale PNG (white = filled)."""
    pixels = np.clip(np.round(coverage * _CHANNEL_MAX), 0, _CHANNEL_MAX).astype(np.uint8)
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


def coverage_to_grid(coverage: NDArray[np.float64], threshold: float = _TEXT_FILL_THRESHOLD) -> NDArray[np.int8]:
    return (coverage >= threshold).astype(np.int8)


def grid_to_text(
    grid: NDArray[np.int8],
    filled: str = "X",
    empty: str = ".",
) -> str:
    """Convert a grid to a text representation."""
    rows = []
    for row in grid:
        rows.append(" ".join(filled if cell else empty for cell in row))
    return "\n".join(rows)


def grid_fill_percentage(grid: NDArray[np.int8]) -> float:
    """Percentage of filled cells."""
    total = grid.size
    if total == 0:
        return 0.0
    return float(np.sum(grid) / total * 100)


def rasterize_geometry(geom: BaseGeometry | None, grid: PixelGrid) -> NDArray[np.int8]:
    """Fill a Shapely (Multi)Polygon onto ``grid``; 1 where a pixel center is inside.

    Uses skimage.draw.polygon for exteriors and clears interior rings.
    """
    from skimage.draw import polygon as draw_polygon

    out = np.zeros(grid.shape, dtype=np.int8)
    if geom is None or geom.is_empty:
        return out

    polys = list(geom.geoms) if hasattr(geom, "geoms") else [geom]
    for poly in polys:
        if poly.geom_type != "Polygon" or poly.is_empty:
            continue
        # Holes are cleared per polygon so islands inside another polygon's hole survive
        mask = np.zeros(grid.shape, dtype=np.int8)
        rr, cc = _ring_pixels(draw_polygon, poly.exterior.coords, grid)
        mask[rr, cc] = 1
        for interior in poly.interiors:
            rr, cc = _ring_pixels(draw_polygon, interior.coords, grid)
            mask[rr, cc] = 0
        np.maximum(out, mask, out=out)
    return out


def _ring_pixels(draw_polygon, coords, grid: PixelGrid):
    xy = np.asarray(coords, dtype=np.float64)
    # Pixel (j, i) has its center at integer coordinates (j, i) in skimage space
    cols = (xy[:, 0] - grid.xmin) / grid.size - 0.5
    rows = (xy[:, 1] - grid.ymin) / grid.size - 0.5
    return draw_polygon(rows, cols, shape=grid.shape)
