"""Built-in render passes.

P0.01 — connector mask (CONNECTORS layer)
P1.01 — circle fills (CIRCLES layer), painted over the connectors

Circle fills follow the circle material: an inactive cell shows its outer
ring and an empty inner disc; an active cell shows a filled inner disc and
leaves its ring transparent, so connectors stay visible there.
"""

from __future__ import annotations

import numpy as np

from dotgrid.engine.compositor import MaskCompositor
from dotgrid.engine.context import FrameContext
from dotgrid.engine.enumerator import enumerate_connectors
from dotgrid.engine.region import coverage_from_sdf
from dotgrid.engine.registry import Layer, render_pass
from dotgrid.engine.sdf import op_subtraction, sd_circle
from dotgrid.utils.rasterizer import paint_over


@render_pass(id="P0.01", layer=Layer.CONNECTORS, description="Union of connector fill regions")
def connector_mask(ctx: FrameContext) -> None:
    instances = enumerate_connectors(ctx.snapshot)
    if ctx.selection is not None:
        instances = ctx.selection.filter(instances)
    ctx.instances = instances

    compositor = MaskCompositor(ctx.snapshot, ctx.radii, instances)
    coverage = compositor.rasterize(
        ctx.grid,
        band=ctx.band,
        mode=ctx.render.raster_mode,
        workers=ctx.render.workers,
    )
    ctx.layers["connectors"] = coverage
    paint_over(ctx.image, coverage, ctx.palette.connector)


@render_pass(id="P1.01", layer=Layer.CIRCLES, description="Inner and outer circle fills")
def circle_fills(ctx: FrameContext) -> None:
    topo = ctx.topology
    inner, outer = ctx.radii.inner, ctx.radii.outer
    reach = max(inner, outer, 0.0) + ctx.band * 0.5
    footprint = np.zeros(ctx.grid.shape, dtype=np.float64)
    active = ctx.snapshot.as_grid()

    for col, row in topo.cells():
        center = topo.center(col, row)
        window = ctx.grid.window(center[0] - reach, center[1] - reach, center[0] + reach, center[1] + reach)
        if window is None:
            continue
        pts = ctx.grid.pixel_centers(window)
        inner_sdf = sd_circle(pts, center, inner)
        disc = coverage_from_sdf(inner_sdf, ctx.band)
        patch = ctx.image[window]

        if active[row, col]:
            paint_over(patch, disc, ctx.palette.inner_active)
            footprint[window] = np.maximum(footprint[window], disc)
        else:
            ring = coverage_from_sdf(op_subtraction(sd_circle(pts, center, outer), inner_sdf), ctx.band)
            paint_over(patch, ring, ctx.palette.outer)
            paint_over(patch, disc, ctx.palette.inner_empty)
            footprint[window] = np.maximum(footprint[window], np.maximum(ring, disc))

    ctx.layers["circles"] = footprint
