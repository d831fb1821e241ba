"""Error types raised by the connector engine.

Degenerate (empty) connector regions are not errors; they come back as
``False`` / empty geometry.
"""

from __future__ import annotations


class GridError(ValueError):
    """Base class for all dotgrid engine errors."""


class InvalidConfiguration(GridError):
    """Grid or radius configuration that the engine refuses to work with."""


class OutOfBounds(GridError):
    """A cell reference that falls outside the grid."""

    def __init__(self, cell: tuple[int, int], width: int, height: int) -> None:
        self.cell = cell
        self.width = width
        self.height = height
        super().__init__(f"Cell {cell} is outside the {width}x{height} grid")
