"""Activation snapshot — immutable per-cell on/off state for one evaluation pass.

The surrounding application owns activation and mutates it between frames.
The engine only ever sees a frozen copy; "mutators" here return a new
snapshot so a pass can never observe a change mid-evaluation.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dotgrid.engine.errors import InvalidConfiguration
from dotgrid.engine.topology import Cell, GridTopology


class ActivationSnapshot:
    """Row-major boolean flags, one per cell (``index = row * W + col``)."""

    __slots__ = ("topology", "_flags")

    def __init__(self, topology: GridTopology, flags: ArrayLike) -> None:
        arr = np.array(flags, dtype=bool).reshape(-1)
        if arr.size != topology.cell_count:
            raise InvalidConfiguration(
                f"Activation snapshot has {arr.size} entries, grid {topology.width}x{topology.height} "
                f"needs {topology.cell_count}"
            )
        arr.flags.writeable = False
        self.topology = topology
        self._flags = arr

    # ── Construction ──

    @classmethod
    def empty(cls, topology: GridTopology) -> ActivationSnapshot:
        return cls(topology, np.zeros(topology.cell_count, dtype=bool))

    @classmethod
    def full(cls, topology: GridTopology) -> ActivationSnapshot:
        return cls(topology, np.ones(topology.cell_count, dtype=bool))

    @classmethod
    def from_cells(cls, topology: GridTopology, cells: Iterable[Cell]) -> ActivationSnapshot:
        flags = np.zeros(topology.cell_count, dtype=bool)
        for cell in cells:
            flags[topology.index(tuple(cell))] = True
        return cls(topology, flags)

    @classmethod
    def from_rows(cls, topology: GridTopology, rows: Iterable[str], on: str = "X") -> ActivationSnapshot:
        """Build from text rows, first string = row 0. Handy in tests and fixtures."""
        cells = []
        for row, line in enumerate(rows):
            for col, ch in enumerate(line.replace(" ", "")):
                if ch == on:
                    cells.append((col, row))
        return cls.from_cells(topology, cells)

    # ── Queries ──

    @property
    def flags(self) -> NDArray[np.bool_]:
        """Read-only flat flags."""
        return self._flags

    def as_grid(self) -> NDArray[np.bool_]:
        """Read-only (H, W) view indexed ``[row, col]``."""
        return self._flags.reshape(self.topology.height, self.topology.width)

    def is_active(self, cell: Cell) -> bool:
        return bool(self._flags[self.topology.index(cell)])

    def active_cells(self) -> Iterator[Cell]:
        for idx in np.flatnonzero(self._flags):
            yield self.topology.cell(int(idx))

    @property
    def active_count(self) -> int:
        return int(np.count_nonzero(self._flags))

    def __contains__(self, cell: object) -> bool:
        return isinstance(cell, tuple) and self.topology.contains(cell) and self.is_active(cell)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActivationSnapshot):
            return NotImplemented
        return self.topology == other.topology and np.array_equal(self._flags, other._flags)

    def __hash__(self) -> int:
        return hash((self.topology, self._flags.tobytes()))

    def __repr__(self) -> str:
        return f"ActivationSnapshot({self.topology!r}, active={self.active_count})"

    # ── Derived snapshots ──

    def with_cells(self, cells: Iterable[Cell], active: bool = True) -> ActivationSnapshot:
        flags = self._flags.copy()
        for cell in cells:
            flags[self.topology.index(tuple(cell))] = active
        return ActivationSnapshot(self.topology, flags)

    def toggled(self, cell: Cell) -> ActivationSnapshot:
        flags = self._flags.copy()
        idx = self.topology.index(cell)
        flags[idx] = not flags[idx]
        return ActivationSnapshot(self.topology, flags)
