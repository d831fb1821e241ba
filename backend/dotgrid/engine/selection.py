"""Explicit connector selection — an optional policy layered over enumeration.

By default every eligible connector renders (both diagonals of a fully
active block included). Some front-ends want the user to pick instead:

- each 2×2 block holds at most one chosen diagonal, cycled
  None -> \\ -> / -> None when both are possible, toggled when only one is;
- horizontal links are toggled individually;
- a diagonal cannot be chosen while a chosen horizontal runs along the
  block's bottom or top edge, and a horizontal cannot be chosen while a
  diagonal is chosen in the block above or below it.

A selection never changes connector geometry, only which instances render.
Every operation returns a new selection.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.links import ConnectorInstance, ConnectorKind, ConnectorLink, link_from
from dotgrid.engine.topology import Cell

logger = logging.getLogger(__name__)

_CYCLE = (None, ConnectorKind.DIAGONAL_DOWN, ConnectorKind.DIAGONAL_UP)


def diagonal_link(block: Cell, kind: ConnectorKind) -> ConnectorLink:
    col, row = block
    if kind is ConnectorKind.DIAGONAL_DOWN:
        return ConnectorLink((col, row), (col + 1, row + 1), kind)
    if kind is ConnectorKind.DIAGONAL_UP:
        return ConnectorLink((col, row + 1), (col + 1, row), kind)
    raise ValueError(f"{kind} is not a diagonal kind")


def available_diagonals(snapshot: ActivationSnapshot, block: Cell) -> list[ConnectorKind]:
    ll, lr, ul, ur = snapshot.topology.block_cells(block)
    kinds = []
    if snapshot.is_active(ll) and snapshot.is_active(ur):
        kinds.append(ConnectorKind.DIAGONAL_DOWN)
    if snapshot.is_active(ul) and snapshot.is_active(lr):
        kinds.append(ConnectorKind.DIAGONAL_UP)
    return kinds


@dataclass(frozen=True)
class ConnectorSelection:
    diagonals: Mapping[Cell, ConnectorKind] = field(default_factory=dict)
    horizontals: frozenset[Cell] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "diagonals", MappingProxyType(dict(self.diagonals)))
        object.__setattr__(self, "horizontals", frozenset(self.horizontals))

    def diagonal_at(self, block: Cell) -> ConnectorKind | None:
        return self.diagonals.get(block)

    def _with(self, diagonals=None, horizontals=None) -> ConnectorSelection:
        return ConnectorSelection(
            diagonals=self.diagonals if diagonals is None else diagonals,
            horizontals=self.horizontals if horizontals is None else horizontals,
        )

    # ── Blocking rules ──

    def diagonal_blocked(self, block: Cell) -> bool:
        col, row = block
        return (col, row) in self.horizontals or (col, row + 1) in self.horizontals

    def horizontal_blocked(self, cell: Cell) -> bool:
        col, row = cell
        return self.diagonal_at((col, row - 1)) is not None or self.diagonal_at((col, row)) is not None

    # ── Edits ──

    def set_diagonal(self, block: Cell, kind: ConnectorKind | None) -> ConnectorSelection:
        diagonals = dict(self.diagonals)
        if kind is None:
            diagonals.pop(block, None)
        else:
            diagonals[block] = kind
        return self._with(diagonals=diagonals)

    def cycle_diagonal(self, snapshot: ActivationSnapshot, block: Cell) -> ConnectorSelection:
        """Advance the block's chosen diagonal among those currently possible."""
        options = available_diagonals(snapshot, block)
        current = self.diagonal_at(block)
        if not options:
            return self.set_diagonal(block, None)
        if len(options) == 2:
            nxt = _CYCLE[(_CYCLE.index(current) + 1) % len(_CYCLE)]
        else:
            nxt = None if current is options[0] else options[0]
        if nxt is not None and self.diagonal_blocked(block):
            logger.debug("Diagonal at block %s blocked by a chosen horizontal", block)
            nxt = None
        return self.set_diagonal(block, nxt)

    def choose_diagonal(self, snapshot: ActivationSnapshot, block: Cell, kind: ConnectorKind) -> ConnectorSelection:
        """Toggle one specific diagonal (used for clicks away from the block center)."""
        if kind not in available_diagonals(snapshot, block):
            return self
        if self.diagonal_at(block) is kind:
            return self.set_diagonal(block, None)
        if self.diagonal_blocked(block):
            logger.debug("Diagonal at block %s blocked by a chosen horizontal", block)
            return self.set_diagonal(block, None)
        return self.set_diagonal(block, kind)

    def toggle_horizontal(self, snapshot: ActivationSnapshot, cell: Cell) -> ConnectorSelection:
        """Toggle the horizontal link starting at ``cell``; refused when blocked or inactive."""
        if cell in self.horizontals:
            return self._with(horizontals=self.horizontals - {cell})
        link = link_from(snapshot.topology, cell, ConnectorKind.HORIZONTAL)
        if not (snapshot.is_active(link.a) and snapshot.is_active(link.b)):
            return self
        if self.horizontal_blocked(cell):
            logger.debug("Horizontal at %s blocked by a chosen diagonal", cell)
            return self
        return self._with(horizontals=self.horizontals | {cell})

    def pruned(self, snapshot: ActivationSnapshot) -> ConnectorSelection:
        """Drop choices whose endpoints are no longer both active."""
        diagonals = {
            block: kind
            for block, kind in self.diagonals.items()
            if kind in available_diagonals(snapshot, block)
        }
        horizontals = frozenset(
            cell
            for cell in self.horizontals
            if snapshot.is_active(cell) and snapshot.is_active((cell[0] + 1, cell[1]))
        )
        return ConnectorSelection(diagonals=diagonals, horizontals=horizontals)

    # ── Rendering ──

    def chosen_links(self) -> set[ConnectorLink]:
        links = {diagonal_link(block, kind) for block, kind in self.diagonals.items()}
        links |= {ConnectorLink(cell, (cell[0] + 1, cell[1]), ConnectorKind.HORIZONTAL) for cell in self.horizontals}
        return links

    def filter(self, instances: list[ConnectorInstance]) -> list[ConnectorInstance]:
        chosen = self.chosen_links()
        return [inst for inst in instances if inst.link in chosen]


def nearest_diagonal(snapshot: ActivationSnapshot, block: Cell, point) -> ConnectorKind:
    """Which diagonal line of the block the point lies closer to."""
    topo = snapshot.topology
    ll, lr, ul, ur = (topo.center(*c) for c in topo.block_cells(block))
    dist_down = _line_distance(point, ll, ur)
    dist_up = _line_distance(point, ul, lr)
    return ConnectorKind.DIAGONAL_UP if dist_up < dist_down else ConnectorKind.DIAGONAL_DOWN


def is_center_click(snapshot: ActivationSnapshot, block: Cell, point, center_zone_fraction: float) -> bool:
    topo = snapshot.topology
    corners = [topo.center(*c) for c in topo.block_cells(block)]
    cx = sum(c[0] for c in corners) / 4
    cy = sum(c[1] for c in corners) / 4
    return math.hypot(point[0] - cx, point[1] - cy) < topo.spacing * center_zone_fraction


def select_at(
    selection: ConnectorSelection,
    snapshot: ActivationSnapshot,
    point,
    center_zone_fraction: float,
) -> ConnectorSelection:
    """Apply a block click at ``point``: cycle at the center, pick a diagonal elsewhere."""
    block = snapshot.topology.block_at(point)
    if block is None:
        return selection
    if is_center_click(snapshot, block, point, center_zone_fraction):
        return selection.cycle_diagonal(snapshot, block)
    return selection.choose_diagonal(snapshot, block, nearest_diagonal(snapshot, block, point))


def _line_distance(p, a, b) -> float:
    dx, dy = b[0] - a[0], b[1] - a[1]
    return abs((p[0] - a[0]) * dy - (p[1] - a[1]) * dx) / math.hypot(dx, dy)
