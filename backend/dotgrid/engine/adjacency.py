"""Adjacency-list export of an activation snapshot and its connectors."""

from __future__ import annotations

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.links import ConnectorInstance
from dotgrid.engine.topology import Cell
from dotgrid.models.adjacency import AdjacencyList, Connection


def dot_id(cell: Cell) -> str:
    col, row = cell
    return f"a-{row}-{col}"


def to_adjacency_list(snapshot: ActivationSnapshot, instances: list[ConnectorInstance]) -> AdjacencyList:
    """Active dots plus one entry per connector, both sorted by id."""
    dots = sorted(dot_id(cell) for cell in snapshot.active_cells())
    connections = [
        Connection(
            type="diagonal" if inst.kind.is_diagonal else "horizontal",
            dot1=dot_id(inst.link.a),
            dot2=dot_id(inst.link.b),
        )
        for inst in instances
    ]
    connections.sort(key=lambda c: (c.dot1, c.dot2))
    return AdjacencyList(dots=dots, connections=connections)
