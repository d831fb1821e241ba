"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from dotgrid.config import settings
from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.config import GridConfig, RenderConfig
from dotgrid.engine.errors import InvalidConfiguration
from dotgrid.engine.links import ConnectorKind
from dotgrid.engine.selection import ConnectorSelection


class GridRequest(BaseModel):
    width: int = Field(default_factory=lambda: settings.default_width, description="Columns")
    height: int = Field(default_factory=lambda: settings.default_height, description="Rows")
    spacing: float = Field(
        default_factory=lambda: settings.default_spacing,
        description="Distance between neighbouring cell centers",
    )
    inner_radius: float = Field(default_factory=lambda: settings.default_inner_radius, description="Base inner radius")
    outer_radius: float = Field(default_factory=lambda: settings.default_outer_radius, description="Base outer radius")
    scale: float = Field(default=1.0, description="Multiplier applied to both radii")
    active: list[tuple[int, int]] = Field(
        default_factory=list,
        description="Active cells as [col, row] pairs",
    )

    def grid_config(self) -> GridConfig:
        if self.width * self.height > settings.max_grid_cells:
            raise InvalidConfiguration(
                f"Grid would have {self.width}x{self.height} cells, limit is {settings.max_grid_cells}"
            )
        return GridConfig(
            width=self.width,
            height=self.height,
            spacing=self.spacing,
            inner_radius=self.inner_radius,
            outer_radius=self.outer_radius,
            scale=self.scale,
        ).validate()

    def snapshot(self, config: GridConfig | None = None) -> ActivationSnapshot:
        config = config or self.grid_config()
        return ActivationSnapshot.from_cells(config.topology(), self.active)


class DiagonalChoice(BaseModel):
    block: tuple[int, int] = Field(..., description="Lower-left cell of the 2x2 block")
    kind: Literal["diagonal_down", "diagonal_up"]


class SelectionParams(BaseModel):
    diagonals: list[DiagonalChoice] = Field(default_factory=list)
    horizontals: list[tuple[int, int]] = Field(
        default_factory=list,
        description="Left cells of chosen horizontal links",
    )

    def to_selection(self) -> ConnectorSelection:
        return ConnectorSelection(
            diagonals={tuple(d.block): ConnectorKind(d.kind) for d in self.diagonals},
            horizontals=frozenset(tuple(c) for c in self.horizontals),
        )


class RenderRequest(GridRequest):
    pixel_size: float = Field(default_factory=lambda: settings.default_pixel_size, description="World units per pixel")
    aa_width: float = Field(default=1.0, description="Anti-aliasing band in pixels (0 = hard mask)")
    mode: Literal["instance", "pixel"] = Field(default="instance", description="Raster path")
    selection: SelectionParams | None = Field(
        default=None,
        description="Explicit connector choices; omitted = every eligible connector",
    )

    def render_config(self) -> RenderConfig:
        return RenderConfig(
            pixel_size=self.pixel_size,
            aa_width=self.aa_width,
            raster_mode=self.mode,
            workers=settings.render_workers,
            center_zone_fraction=settings.center_zone_fraction,
        )


class MaskRequest(RenderRequest):
    format: Literal["png", "ascii"] = Field(default="png", description="Output encoding")


class HitRequest(GridRequest):
    x: float = Field(..., description="Point x in world units")
    y: float = Field(..., description="Point y in world units")
    center_zone_fraction: float = Field(
        default_factory=lambda: settings.center_zone_fraction,
        description="Center-click radius as a fraction of the spacing",
    )
