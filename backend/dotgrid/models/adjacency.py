"""Adjacency-list export model (dots + connections)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class Connection(BaseModel):
    type: Literal["horizontal", "diagonal"]
    dot1: str
    dot2: str


class AdjacencyList(BaseModel):
    dots: list[str] = Field(default_factory=list, description="Active dots as 'a-<row>-<col>'")
    connections: list[Connection] = Field(default_factory=list)
