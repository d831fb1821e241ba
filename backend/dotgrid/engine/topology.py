"""Grid topology — the one place cell centers are computed.

Rendering, hit-testing and the connector region math all call
``GridTopology.center``. Rows grow along +y, columns along +x, and the
whole W×H block is centered on the origin.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dotgrid.engine.errors import InvalidConfiguration, OutOfBounds

Cell = tuple[int, int]  # (col, row)

# Neighbour offsets, relative to (col, row)
RIGHT = (1, 0)
UP = (0, 1)
DIAGONAL_DOWN = (1, 1)  # \  same as ConnectorKind.DIAGONAL_DOWN
DIAGONAL_UP = (1, -1)  # /  same as ConnectorKind.DIAGONAL_UP


class GridTopology:
    """Maps ``(col, row)`` to world space and back."""

    def __init__(self, width: int, height: int, spacing: float) -> None:
        if width < 1 or height < 1:
            raise InvalidConfiguration(f"Grid must be at least 1x1, got {width}x{height}")
        if spacing <= 0:
            raise InvalidConfiguration(f"Spacing must be positive, got {spacing}")
        self.width = int(width)
        self.height = int(height)
        self.spacing = float(spacing)
        self.offset = np.array(
            [-(self.width - 1) * self.spacing / 2, -(self.height - 1) * self.spacing / 2],
            dtype=np.float64,
        )

    def __repr__(self) -> str:
        return f"GridTopology({self.width}x{self.height}, spacing={self.spacing})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridTopology):
            return NotImplemented
        return (self.width, self.height, self.spacing) == (other.width, other.height, other.spacing)

    def __hash__(self) -> int:
        return hash((self.width, self.height, self.spacing))

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    # ── Centers ──

    def center(self, col: ArrayLike, row: ArrayLike) -> NDArray[np.float64]:
        """World-space center. Scalars give shape (2,), arrays give (..., 2)."""
        grid = np.stack(np.broadcast_arrays(np.asarray(col), np.asarray(row)), axis=-1)
        return self.offset + grid.astype(np.float64) * self.spacing

    def centers(self) -> NDArray[np.float64]:
        """All centers as an (H, W, 2) array indexed ``[row, col]``."""
        rows, cols = np.mgrid[0 : self.height, 0 : self.width]
        return self.center(cols, rows)

    # ── Indexing (row-major, shared with activation snapshots) ──

    def index(self, cell: Cell) -> int:
        col, row = self.require(cell)
        return row * self.width + col

    def cell(self, index: int) -> Cell:
        if not 0 <= index < self.cell_count:
            raise OutOfBounds((index % self.width, index // self.width), self.width, self.height)
        return (index % self.width, index // self.width)

    def cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for row in range(self.height):
            for col in range(self.width):
                yield (col, row)

    def contains(self, cell: Cell) -> bool:
        col, row = cell
        return 0 <= col < self.width and 0 <= row < self.height

    def require(self, cell: Cell) -> Cell:
        if not self.contains(cell):
            raise OutOfBounds(tuple(cell), self.width, self.height)
        return (int(cell[0]), int(cell[1]))

    # ── Neighbours ──

    def offset_cell(self, cell: Cell, delta: tuple[int, int]) -> Cell | None:
        """``cell + delta`` if it lies on the grid, else None."""
        other = (cell[0] + delta[0], cell[1] + delta[1])
        return other if self.contains(other) else None

    def neighbors(self, cell: Cell) -> dict[str, Cell | None]:
        """Right, up and the two right-hand diagonal neighbours, keyed like ``ConnectorKind``."""
        self.require(cell)
        return {
            "right": self.offset_cell(cell, RIGHT),
            "up": self.offset_cell(cell, UP),
            "diagonal_down": self.offset_cell(cell, DIAGONAL_DOWN),
            "diagonal_up": self.offset_cell(cell, DIAGONAL_UP),
        }

    def blocks(self) -> Iterator[Cell]:
        """Lower-left cell of every 2×2 block."""
        for row in range(self.height - 1):
            for col in range(self.width - 1):
                yield (col, row)

    def block_cells(self, block: Cell) -> tuple[Cell, Cell, Cell, Cell]:
        """(lower-left, lower-right, upper-left, upper-right) of a 2×2 block."""
        col, row = block
        if not (0 <= col < self.width - 1 and 0 <= row < self.height - 1):
            raise OutOfBounds(tuple(block), self.width - 1, self.height - 1)
        return ((col, row), (col + 1, row), (col, row + 1), (col + 1, row + 1))

    # ── World → grid ──

    def grid_coords(self, points: ArrayLike) -> NDArray[np.float64]:
        """Fractional (col, row) coordinates of world points."""
        return (np.asarray(points, dtype=np.float64) - self.offset) / self.spacing

    def cell_at(self, point: ArrayLike, radius: float) -> Cell | None:
        """Hit-test: the nearest cell whose center is within ``radius``."""
        gc = self.grid_coords(point)
        col, row = int(round(gc[0])), int(round(gc[1]))
        if not self.contains((col, row)):
            return None
        center = self.center(col, row)
        if math.hypot(point[0] - center[0], point[1] - center[1]) <= radius:
            return (col, row)
        return None

    def block_at(self, point: ArrayLike) -> Cell | None:
        """The 2×2 block whose center-to-center box contains the point."""
        gc = self.grid_coords(point)
        col, row = math.floor(gc[0]), math.floor(gc[1])
        # Points on the far edge belong to the last block
        col = min(col, self.width - 2) if gc[0] <= self.width - 1 else col
        row = min(row, self.height - 2) if gc[1] <= self.height - 1 else row
        if 0 <= col < self.width - 1 and 0 <= row < self.height - 1:
            return (col, row)
        return None

    def extent(self, margin: float = 0.0) -> tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax) of all centers, padded by ``margin``."""
        lo = self.offset
        hi = self.center(self.width - 1, self.height - 1)
        return (
            float(lo[0] - margin),
            float(lo[1] - margin),
            float(hi[0] + margin),
            float(hi[1] + margin),
        )
