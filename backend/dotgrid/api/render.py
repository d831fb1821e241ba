"""POST /api/render/* — connector masks, composited frames and SVG."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from dotgrid.config import Settings
from dotgrid.dependencies import get_settings
from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.compositor import MaskCompositor, PixelGrid
from dotgrid.engine.config import CircleRadii, RenderConfig
from dotgrid.engine.context import FrameContext, frame_grid
from dotgrid.engine.enumerator import enumerate_connectors
from dotgrid.engine.errors import InvalidConfiguration
from dotgrid.engine.frame import FrameRenderer
from dotgrid.engine.links import ConnectorInstance
from dotgrid.engine.selection import ConnectorSelection
from dotgrid.models.requests import MaskRequest, RenderRequest
from dotgrid.models.responses import MaskAsciiResponse
from dotgrid.svg.serializer import frame_to_svg
from dotgrid.utils.rasterizer import (
    coverage_to_grid,
    coverage_to_png,
    grid_fill_percentage,
    grid_to_text,
    image_to_png,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/render")


@dataclass
class _RenderJob:
    snapshot: ActivationSnapshot
    radii: CircleRadii
    grid: PixelGrid
    render: RenderConfig
    selection: ConnectorSelection | None

    def instances(self) -> list[ConnectorInstance]:
        instances = enumerate_connectors(self.snapshot)
        if self.selection is not None:
            instances = self.selection.filter(instances)
        return instances


def _prepare(req: RenderRequest, settings: Settings) -> _RenderJob:
    config = req.grid_config()
    render = req.render_config()

    # Size check before the activation array or any image buffer is allocated
    grid = frame_grid(config.topology(), config.radii, render)
    if grid.nx * grid.ny > settings.max_frame_pixels:
        raise InvalidConfiguration(
            f"Frame would be {grid.nx}x{grid.ny} pixels, limit is {settings.max_frame_pixels}"
        )

    snapshot = req.snapshot(config)
    selection = req.selection.to_selection().pruned(snapshot) if req.selection is not None else None
    return _RenderJob(snapshot=snapshot, radii=config.radii, grid=grid, render=render, selection=selection)


@router.post("/mask", response_model=None)
async def render_mask(req: MaskRequest, settings: Settings = Depends(get_settings)) -> Response | MaskAsciiResponse:
    job = _prepare(req, settings)
    coverage = MaskCompositor(job.snapshot, job.radii, job.instances()).rasterize(
        job.grid,
        band=job.render.band,
        mode=job.render.raster_mode,
        workers=job.render.workers,
    )

    if req.format == "ascii":
        grid = coverage_to_grid(coverage)
        return MaskAsciiResponse(
            width=job.grid.nx,
            height=job.grid.ny,
            text=grid_to_text(grid),
            fill_percentage=round(grid_fill_percentage(grid), 2),
        )
    return Response(content=coverage_to_png(coverage), media_type="image/png")


@router.post("/frame")
async def render_frame(req: RenderRequest, settings: Settings = Depends(get_settings)) -> Response:
    job = _prepare(req, settings)
    ctx = FrameContext(
        snapshot=job.snapshot,
        radii=job.radii,
        grid=job.grid,
        render=job.render,
        selection=job.selection,
    )
    ctx = FrameRenderer().run(ctx)
    if ctx.errors:
        logger.warning("Frame rendered with failed passes: %s", ctx.errors)
    return Response(
        content=image_to_png(ctx.image),
        media_type="image/png",
        headers={"X-Connector-Count": str(len(ctx.instances))},
    )


@router.post("/svg")
async def render_svg(req: RenderRequest, settings: Settings = Depends(get_settings)) -> Response:
    job = _prepare(req, settings)
    svg = frame_to_svg(job.snapshot, job.radii, job.instances(), render=job.render)
    return Response(content=svg, media_type="image/svg+xml")
