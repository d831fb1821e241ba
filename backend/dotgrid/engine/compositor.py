"""Mask compositor — union of every eligible connector's fill region.

Union is ``min`` over SDFs (``max`` over coverage), so it is order
independent and idempotent. Two interchangeable raster paths:

- "instance": each connector evaluates only the pixels inside its bounding
  box (plus half the AA band) and merges into an accumulation buffer with
  ``np.maximum``. Patches can be computed on a thread pool; the merge stays
  on the calling thread.
- "pixel": each pixel looks up the connectors of the blocks around it and
  evaluates the same region functions with per-pixel centers.

The compositor output is the CONNECTORS layer only. Circles are painted on
top of it by the frame renderer.
"""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.config import CircleRadii
from dotgrid.engine.enumerator import enumerate_connectors
from dotgrid.engine.links import ConnectorInstance, ConnectorKind
from dotgrid.engine.region import connector_sdf, coverage_from_sdf, diagonal_sdf, horizontal_sdf
from dotgrid.engine.sdf import as_points, op_union
from dotgrid.engine.topology import GridTopology

logger = logging.getLogger(__name__)

Window = tuple[slice, slice]


@dataclass(frozen=True)
class PixelGrid:
    """A world-space window sampled at pixel centers.

    Pixel ``[j, i]`` has center ``(xmin + (i + 0.5) * size, ymin + (j + 0.5) * size)``;
    row 0 is the smallest y.
    """

    xmin: float
    ymin: float
    size: float
    nx: int
    ny: int

    @classmethod
    def from_extent(cls, extent: tuple[float, float, float, float], pixel_size: float) -> PixelGrid:
        xmin, ymin, xmax, ymax = extent
        nx = max(1, math.ceil((xmax - xmin) / pixel_size))
        ny = max(1, math.ceil((ymax - ymin) / pixel_size))
        return cls(xmin=xmin, ymin=ymin, size=pixel_size, nx=nx, ny=ny)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.ny, self.nx)

    def pixel_centers(self, window: Window | None = None) -> NDArray[np.float64]:
        """(rows, cols, 2) world coordinates of pixel centers."""
        rows, cols = window or (slice(0, self.ny), slice(0, self.nx))
        xs = self.xmin + (np.arange(cols.start, cols.stop, dtype=np.float64) + 0.5) * self.size
        ys = self.ymin + (np.arange(rows.start, rows.stop, dtype=np.float64) + 0.5) * self.size
        gx, gy = np.meshgrid(xs, ys)
        return np.stack([gx, gy], axis=-1)

    def window(self, xmin: float, ymin: float, xmax: float, ymax: float) -> Window | None:
        """Pixel slices whose centers may fall in the box, with one pixel of slack."""
        i0 = max(0, math.floor((xmin - self.xmin) / self.size - 0.5) - 1)
        i1 = min(self.nx, math.ceil((xmax - self.xmin) / self.size - 0.5) + 2)
        j0 = max(0, math.floor((ymin - self.ymin) / self.size - 0.5) - 1)
        j1 = min(self.ny, math.ceil((ymax - self.ymin) / self.size - 0.5) + 2)
        if i0 >= i1 or j0 >= j1:
            return None
        return (slice(j0, j1), slice(i0, i1))


class MaskCompositor:
    """Combines connector regions for one activation snapshot."""

    def __init__(
        self,
        snapshot: ActivationSnapshot,
        radii: CircleRadii,
        instances: list[ConnectorInstance] | None = None,
    ) -> None:
        self.snapshot = snapshot
        self.topology: GridTopology = snapshot.topology
        self.radii = radii
        self.instances = list(instances) if instances is not None else enumerate_connectors(snapshot)
        self._lookup = self._build_lookup()

    def _build_lookup(self) -> dict[ConnectorKind, NDArray[np.bool_]]:
        """Per-kind boolean tables indexed [row, col] of the link's block/left cell."""
        w, h = self.topology.width, self.topology.height
        tables = {
            ConnectorKind.HORIZONTAL: np.zeros((h, max(w - 1, 0)), dtype=bool),
            ConnectorKind.DIAGONAL_DOWN: np.zeros((max(h - 1, 0), max(w - 1, 0)), dtype=bool),
            ConnectorKind.DIAGONAL_UP: np.zeros((max(h - 1, 0), max(w - 1, 0)), dtype=bool),
        }
        for inst in self.instances:
            link = inst.link
            if link.kind is ConnectorKind.HORIZONTAL:
                tables[link.kind][link.a[1], link.a[0]] = True
            else:
                col, row = link.block
                tables[link.kind][row, col] = True
        return tables

    # ── Point queries ──

    def sdf(self, points: ArrayLike) -> NDArray[np.float64]:
        """Union SDF; +inf where there are no connectors at all."""
        pts = as_points(points)
        if not self.instances:
            return np.full(pts.shape[:-1], np.inf)
        return op_union(*(connector_sdf(pts, inst, self.radii) for inst in self.instances))

    def contains(self, points: ArrayLike) -> NDArray[np.bool_] | bool:
        inside = self.sdf(points) < 0.0
        if inside.ndim == 0:
            return bool(inside)
        return inside

    def coverage(self, points: ArrayLike, band: float) -> NDArray[np.float64]:
        return coverage_from_sdf(self.sdf(points), band)

    # ── Rasterization ──

    def rasterize(
        self,
        grid: PixelGrid,
        band: float = 0.0,
        mode: str = "instance",
        workers: int = 1,
    ) -> NDArray[np.float64]:
        """Connector coverage over ``grid`` as a (ny, nx) float array in [0, 1]."""
        start = time.perf_counter()
        if mode == "instance":
            out = self._rasterize_instances(grid, band, workers)
        elif mode == "pixel":
            out = self._rasterize_pixels(grid, band)
        else:
            raise ValueError(f"Unknown raster mode {mode!r}")
        logger.info(
            "Rasterized %d connectors (%s mode) into %dx%d pixels in %.1fms",
            len(self.instances),
            mode,
            grid.nx,
            grid.ny,
            (time.perf_counter() - start) * 1000,
        )
        return out

    def _instance_patch(
        self, inst: ConnectorInstance, grid: PixelGrid, band: float
    ) -> tuple[Window, NDArray[np.float64]] | None:
        pad = max(band, 0.0) * 0.5
        xmin, ymin, xmax, ymax = inst.bounds(max(self.radii.inner, 0.0))
        window = grid.window(xmin - pad, ymin - pad, xmax + pad, ymax + pad)
        if window is None:
            return None
        pts = grid.pixel_centers(window)
        return window, coverage_from_sdf(connector_sdf(pts, inst, self.radii), band)

    def _rasterize_instances(self, grid: PixelGrid, band: float, workers: int) -> NDArray[np.float64]:
        out = np.zeros(grid.shape, dtype=np.float64)

        if workers > 1 and len(self.instances) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                patches = pool.map(lambda inst: self._instance_patch(inst, grid, band), self.instances)
                for patch in patches:
                    _merge(out, patch)
        else:
            for inst in self.instances:
                _merge(out, self._instance_patch(inst, grid, band))
        return out

    def _rasterize_pixels(self, grid: PixelGrid, band: float) -> NDArray[np.float64]:
        topo = self.topology
        pts = grid.pixel_centers()
        gc = topo.grid_coords(pts)
        bc = np.floor(gc[..., 0]).astype(np.int64)
        br = np.floor(gc[..., 1]).astype(np.int64)
        best = np.full(grid.shape, np.inf)

        half = max(band, 0.0) * 0.5
        reach = math.ceil(half / topo.spacing)
        reach_h = math.ceil((max(self.radii.inner, 0.0) + half) / topo.spacing)
        col_offsets = range(-1 - reach, reach + 1)

        horiz = self._lookup[ConnectorKind.HORIZONTAL]
        for dx in col_offsets:
            for dy in range(-reach_h, reach_h + 1):
                col, row = bc + dx, br + dy
                sel = _lookup_mask(horiz, col, row)
                if not sel.any():
                    continue
                c, r = col[sel], row[sel]
                d = horizontal_sdf(pts[sel], topo.center(c, r), topo.center(c + 1, r), self.radii.inner)
                best[sel] = np.minimum(best[sel], d)

        down = self._lookup[ConnectorKind.DIAGONAL_DOWN]
        up = self._lookup[ConnectorKind.DIAGONAL_UP]
        for dx in col_offsets:
            for dy in col_offsets:
                col, row = bc + dx, br + dy
                for table, is_down in ((down, True), (up, False)):
                    sel = _lookup_mask(table, col, row)
                    if not sel.any():
                        continue
                    c, r = col[sel], row[sel]
                    ll, lr = topo.center(c, r), topo.center(c + 1, r)
                    ul, ur = topo.center(c, r + 1), topo.center(c + 1, r + 1)
                    if is_down:
                        d = diagonal_sdf(pts[sel], ll, ur, lr, ul, self.radii.inner, self.radii.outer)
                    else:
                        d = diagonal_sdf(pts[sel], ul, lr, ur, ll, self.radii.inner, self.radii.outer)
                    best[sel] = np.minimum(best[sel], d)

        return coverage_from_sdf(best, band)


def _merge(out: NDArray[np.float64], patch: tuple[Window, NDArray[np.float64]] | None) -> None:
    if patch is None:
        return
    window, values = patch
    np.maximum(out[window], values, out=out[window])


def _lookup_mask(table: NDArray[np.bool_], col: NDArray[np.int64], row: NDArray[np.int64]) -> NDArray[np.bool_]:
    rows, cols = table.shape
    valid = (col >= 0) & (col < cols) & (row >= 0) & (row < rows)
    mask = np.zeros(col.shape, dtype=bool)
    if rows == 0 or cols == 0:
        return mask
    mask[valid] = table[row[valid], col[valid]]
    return mask


def compose_connectors(
    snapshot: ActivationSnapshot,
    radii: CircleRadii,
    grid: PixelGrid,
    band: float = 0.0,
    mode: str = "instance",
) -> NDArray[np.float64]:
    """One-shot helper: enumerate and rasterize in a single call."""
    return MaskCompositor(snapshot, radii).rasterize(grid, band=band, mode=mode)
