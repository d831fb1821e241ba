"""Shared test fixtures."""

from __future__ import annotations

import pytest

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.config import CircleRadii, GridConfig
from dotgrid.engine.topology import GridTopology


# The 2x2 reference block: S=1.5, r=0.4, R=0.5
BLOCK_CONFIG = GridConfig(width=2, height=2, spacing=1.5, inner_radius=0.4, outer_radius=0.5)

# A 5x4 pattern with horizontals, both diagonals and isolated cells
PATTERN_ROWS = [
    "X X . . X",
    ". X X . .",
    ". X X . X",
    "X . . X .",
]


@pytest.fixture
def block_topology() -> GridTopology:
    return BLOCK_CONFIG.topology()


@pytest.fixture
def block_radii() -> CircleRadii:
    return BLOCK_CONFIG.radii


@pytest.fixture
def full_block(block_topology) -> ActivationSnapshot:
    return ActivationSnapshot.full(block_topology)


@pytest.fixture
def pattern_topology() -> GridTopology:
    return GridTopology(5, 4, 1.0)


@pytest.fixture
def pattern_snapshot(pattern_topology) -> ActivationSnapshot:
    return ActivationSnapshot.from_rows(pattern_topology, PATTERN_ROWS)


@pytest.fixture
def pattern_radii() -> CircleRadii:
    return CircleRadii(inner=0.3, outer=0.45)
