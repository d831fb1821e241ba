"""POST /api/connectors — eligible connectors for an activation snapshot."""

from __future__ import annotations

from fastapi import APIRouter

from dotgrid.engine.adjacency import to_adjacency_list
from dotgrid.engine.enumerator import enumerate_connectors
from dotgrid.models.requests import GridRequest
from dotgrid.models.responses import ConnectorOut, ConnectorsResponse

router = APIRouter()


@router.post("/connectors", response_model=ConnectorsResponse)
async def connectors(req: GridRequest) -> ConnectorsResponse:
    snapshot = req.snapshot()
    instances = enumerate_connectors(snapshot)

    return ConnectorsResponse(
        count=len(instances),
        connectors=[
            ConnectorOut(kind=inst.kind.value, a=inst.link.a, b=inst.link.b, block=inst.link.block)
            for inst in instances
        ],
        adjacency=to_adjacency_list(snapshot, instances),
    )
