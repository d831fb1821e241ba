"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from dotgrid.models.adjacency import AdjacencyList


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    passes_registered: int = 0


class ConnectorOut(BaseModel):
    kind: str
    a: tuple[int, int]
    b: tuple[int, int]
    block: tuple[int, int] | None = None


class ConnectorsResponse(BaseModel):
    count: int = 0
    connectors: list[ConnectorOut] = Field(default_factory=list)
    adjacency: AdjacencyList


class MaskAsciiResponse(BaseModel):
    width: int
    height: int
    text: str
    fill_percentage: float = 0.0


class HitResponse(BaseModel):
    cell: tuple[int, int] | None = None
    active: bool = False
    block: tuple[int, int] | None = None
    nearest_diagonal: str | None = None
    center_click: bool = False
