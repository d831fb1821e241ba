"""Connector enumerator — which links are eligible under an activation snapshot.

Every unordered link is produced exactly once, from its left endpoint:
    horizontal   (col, row)   -> (col+1, row)     for col < W-1
    diagonal \\   (col, row)   -> (col+1, row+1)   for col < W-1, row < H-1
    diagonal /   (col, row+1) -> (col+1, row)     same 2×2 block
A link is eligible iff both endpoints are active. Nothing else gates it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.links import ConnectorInstance, ConnectorKind, ConnectorLink
from dotgrid.engine.topology import Cell, GridTopology

logger = logging.getLogger(__name__)


def candidate_links(topology: GridTopology) -> Iterator[ConnectorLink]:
    """All links the grid can hold, in row-major order of their block/left cell."""
    w, h = topology.width, topology.height
    for row in range(h):
        for col in range(w - 1):
            yield ConnectorLink((col, row), (col + 1, row), ConnectorKind.HORIZONTAL)
            if row < h - 1:
                yield ConnectorLink((col, row), (col + 1, row + 1), ConnectorKind.DIAGONAL_DOWN)
                yield ConnectorLink((col, row + 1), (col + 1, row), ConnectorKind.DIAGONAL_UP)


def eligible_links(snapshot: ActivationSnapshot) -> list[ConnectorLink]:
    """Links whose two endpoints are active.

    Vectorised over the (H, W) activation grid so 100×100+ grids stay cheap.
    """
    grid = snapshot.as_grid()
    links: list[ConnectorLink] = []

    horiz = grid[:, :-1] & grid[:, 1:]
    for row, col in np.argwhere(horiz):
        links.append(ConnectorLink((int(col), int(row)), (int(col) + 1, int(row)), ConnectorKind.HORIZONTAL))

    down = grid[:-1, :-1] & grid[1:, 1:]
    for row, col in np.argwhere(down):
        links.append(
            ConnectorLink((int(col), int(row)), (int(col) + 1, int(row) + 1), ConnectorKind.DIAGONAL_DOWN)
        )

    up = grid[1:, :-1] & grid[:-1, 1:]
    for row, col in np.argwhere(up):
        links.append(ConnectorLink((int(col), int(row) + 1), (int(col) + 1, int(row)), ConnectorKind.DIAGONAL_UP))

    links.sort()
    return links


def enumerate_connectors(snapshot: ActivationSnapshot) -> list[ConnectorInstance]:
    """Eligible connector instances for one snapshot, deduplicated and sorted."""
    topology = snapshot.topology
    instances = [ConnectorInstance.from_link(topology, link) for link in eligible_links(snapshot)]
    logger.debug(
        "Enumerated %d connectors from %d active cells (%dx%d grid)",
        len(instances),
        snapshot.active_count,
        topology.width,
        topology.height,
    )
    return instances


def instances_for_block(snapshot: ActivationSnapshot, block: Cell) -> list[ConnectorInstance]:
    """Eligible diagonals inside one 2×2 block."""
    topology = snapshot.topology
    ll, lr, ul, ur = topology.block_cells(block)
    out = []
    if snapshot.is_active(ll) and snapshot.is_active(ur):
        out.append(ConnectorInstance.from_link(topology, ConnectorLink(ll, ur, ConnectorKind.DIAGONAL_DOWN)))
    if snapshot.is_active(ul) and snapshot.is_active(lr):
        out.append(ConnectorInstance.from_link(topology, ConnectorLink(ul, lr, ConnectorKind.DIAGONAL_UP)))
    return out


def is_eligible(snapshot: ActivationSnapshot, link: ConnectorLink) -> bool:
    return snapshot.is_active(link.a) and snapshot.is_active(link.b)
