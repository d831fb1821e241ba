"""POST /api/hit — resolve a world point to a cell and a 2x2 block."""

from __future__ import annotations

from fastapi import APIRouter

from dotgrid.engine.selection import is_center_click, nearest_diagonal
from dotgrid.models.requests import HitRequest
from dotgrid.models.responses import HitResponse

router = APIRouter()


@router.post("/hit", response_model=HitResponse)
async def hit(req: HitRequest) -> HitResponse:
    config = req.grid_config()
    snapshot = req.snapshot(config)
    topo = snapshot.topology
    point = (req.x, req.y)

    cell = topo.cell_at(point, config.radii.outer)
    block = topo.block_at(point)

    diagonal = None
    center_click = False
    if block is not None:
        diagonal = nearest_diagonal(snapshot, block, point).value
        center_click = is_center_click(snapshot, block, point, req.center_zone_fraction)

    return HitResponse(
        cell=cell,
        active=cell is not None and snapshot.is_active(cell),
        block=block,
        nearest_diagonal=diagonal,
        center_click=center_click,
    )
