"""FrameContext — the single state object flowing through the render passes.

Per-layer coverage → FrameContext.layers
Composited pixels  → FrameContext.image (straight RGBA, painter's order)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.compositor import PixelGrid
from dotgrid.engine.config import CircleRadii, Palette, RenderConfig
from dotgrid.engine.links import ConnectorInstance
from dotgrid.engine.topology import GridTopology

if TYPE_CHECKING:
    from dotgrid.engine.selection import ConnectorSelection


@dataclass
class FrameContext:
    """Shared state for one frame. The snapshot is read-only for the whole pass."""

    snapshot: ActivationSnapshot
    radii: CircleRadii
    grid: PixelGrid
    render: RenderConfig = field(default_factory=RenderConfig)
    palette: Palette = field(default_factory=Palette)
    # Optional explicit-choice policy; None renders every eligible connector
    selection: ConnectorSelection | None = None

    # --- Populated by passes ---
    instances: list[ConnectorInstance] = field(default_factory=list)
    # Coverage per layer name, each (ny, nx) in [0, 1]
    layers: dict[str, NDArray[np.float64]] = field(default_factory=dict)
    image: NDArray[np.float64] | None = None

    # --- Frame metadata ---
    completed_passes: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.image is None:
            self.image = np.empty((*self.grid.shape, 4), dtype=np.float64)
            self.image[...] = self.palette.background

    @classmethod
    def for_grid(
        cls,
        snapshot: ActivationSnapshot,
        radii: CircleRadii,
        render: RenderConfig | None = None,
        palette: Palette | None = None,
        selection: ConnectorSelection | None = None,
    ) -> FrameContext:
        """Frame covering every circle, padded by ``margin_factor`` outer radii."""
        render = render or RenderConfig()
        return cls(
            snapshot=snapshot,
            radii=radii,
            grid=frame_grid(snapshot.topology, radii, render),
            render=render,
            palette=palette or Palette(),
            selection=selection,
        )

    @property
    def topology(self) -> GridTopology:
        return self.snapshot.topology

    @property
    def band(self) -> float:
        return self.render.band


def frame_grid(topology: GridTopology, radii: CircleRadii, render: RenderConfig) -> PixelGrid:
    """Pixel grid covering every outer circle, padded by ``margin_factor`` outer radii."""
    margin = render.margin_factor * radii.outer
    return PixelGrid.from_extent(topology.extent(margin), render.pixel_size)
