"""Connector links and instances.

A link is an unordered pair of immediately adjacent cells. An instance is a
link whose endpoints are both active in the current snapshot, with every
center it needs resolved through the topology.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from dotgrid.engine.errors import InvalidConfiguration
from dotgrid.engine.topology import Cell, GridTopology


class ConnectorKind(enum.Enum):
    HORIZONTAL = "horizontal"
    DIAGONAL_DOWN = "diagonal_down"  # \  (col+1, row+1)
    DIAGONAL_UP = "diagonal_up"  # /  (col+1, row-1)

    @property
    def is_diagonal(self) -> bool:
        return self is not ConnectorKind.HORIZONTAL

    @property
    def symbol(self) -> str:
        return {"horizontal": "-", "diagonal_down": "\\", "diagonal_up": "/"}[self.value]

    @property
    def delta(self) -> tuple[int, int]:
        """Offset from the left endpoint to the right endpoint."""
        return {"horizontal": (1, 0), "diagonal_down": (1, 1), "diagonal_up": (1, -1)}[self.value]


@dataclass(frozen=True, order=True)
class ConnectorLink:
    """Canonical form: ``a`` is the left endpoint (smaller column)."""

    a: Cell
    b: Cell
    kind: ConnectorKind

    @property
    def cells(self) -> tuple[Cell, Cell]:
        return (self.a, self.b)

    @property
    def block(self) -> Cell | None:
        """Lower-left cell of the 2×2 block holding a diagonal link."""
        if not self.kind.is_diagonal:
            return None
        return (self.a[0], min(self.a[1], self.b[1]))

    @property
    def flanks(self) -> tuple[Cell, Cell] | None:
        """The two block corners that are not endpoints (diagonals only)."""
        if not self.kind.is_diagonal:
            return None
        return ((self.b[0], self.a[1]), (self.a[0], self.b[1]))

    def __str__(self) -> str:
        return f"{self.a}{self.kind.symbol}{self.b}"


def classify(a: Cell, b: Cell) -> ConnectorKind | None:
    """Kind of link between two cells given left-to-right, or None."""
    dc, dr = b[0] - a[0], b[1] - a[1]
    for kind in ConnectorKind:
        if kind.delta == (dc, dr):
            return kind
    return None


def make_link(topology: GridTopology, first: Cell, second: Cell) -> ConnectorLink:
    """Public link constructor. Order of the two cells does not matter.

    Raises OutOfBounds for cells off the grid and InvalidConfiguration for
    cells that are not immediate horizontal or diagonal neighbours.
    """
    first = topology.require(first)
    second = topology.require(second)
    a, b = sorted((first, second))
    kind = classify(a, b)
    if kind is None:
        raise InvalidConfiguration(f"Cells {first} and {second} are not connectable neighbours")
    return ConnectorLink(a, b, kind)


def link_from(topology: GridTopology, cell: Cell, kind: ConnectorKind) -> ConnectorLink:
    """Link starting at ``cell`` going right in direction ``kind``."""
    cell = topology.require(cell)
    other = (cell[0] + kind.delta[0], cell[1] + kind.delta[1])
    topology.require(other)
    return ConnectorLink(cell, other, kind)


@dataclass(frozen=True)
class ConnectorInstance:
    """An eligible link plus the centers the region math reads."""

    link: ConnectorLink
    center_a: NDArray[np.float64]
    center_b: NDArray[np.float64]
    flank_centers: tuple[NDArray[np.float64], NDArray[np.float64]] | None = None

    @classmethod
    def from_link(cls, topology: GridTopology, link: ConnectorLink) -> ConnectorInstance:
        flank_centers = None
        if link.flanks is not None:
            c, d = link.flanks
            flank_centers = (topology.center(*c), topology.center(*d))
        return cls(
            link=link,
            center_a=topology.center(*link.a),
            center_b=topology.center(*link.b),
            flank_centers=flank_centers,
        )

    @property
    def kind(self) -> ConnectorKind:
        return self.link.kind

    def corner_centers(self) -> NDArray[np.float64]:
        """Endpoint centers, plus flank centers for diagonals, as (N, 2)."""
        pts = [self.center_a, self.center_b]
        if self.flank_centers is not None:
            pts.extend(self.flank_centers)
        return np.stack(pts)

    def bounds(self, inner_radius: float) -> tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax) of the region's bounding box."""
        pts = self.corner_centers()
        xmin, ymin = pts.min(axis=0)
        xmax, ymax = pts.max(axis=0)
        if self.kind is ConnectorKind.HORIZONTAL:
            ymin, ymax = ymin - inner_radius, ymax + inner_radius
        return (float(xmin), float(ymin), float(xmax), float(ymax))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConnectorInstance):
            return NotImplemented
        return self.link == other.link and np.array_equal(self.corner_centers(), other.corner_centers())

    def __hash__(self) -> int:
        return hash(self.link)
