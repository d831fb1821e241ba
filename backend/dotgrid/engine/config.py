"""Engine configuration — grid geometry and rendering tunables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotgrid.engine.errors import InvalidConfiguration

if TYPE_CHECKING:
    from dotgrid.engine.topology import GridTopology

RGBA = tuple[float, float, float, float]

RASTER_MODES = ("instance", "pixel")


@dataclass(frozen=True)
class CircleRadii:
    """World-space radii shared by every cell. Not validated."""

    inner: float
    outer: float


@dataclass(frozen=True)
class GridConfig:
    """Grid dimensions, spacing and the two circle radii.

    Radii are base values multiplied by ``scale``; spacing is not scaled.
    """

    width: int = 10
    height: int = 10
    # Distance between neighbouring cell centers
    spacing: float = 0.9
    # Base radii before scaling
    inner_radius: float = 0.4
    outer_radius: float = 0.5
    scale: float = 1.0

    @property
    def radii(self) -> CircleRadii:
        return CircleRadii(inner=self.inner_radius * self.scale, outer=self.outer_radius * self.scale)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def validate(self) -> GridConfig:
        """Fail fast on configuration the engine must not silently fix."""
        if self.width < 1 or self.height < 1:
            raise InvalidConfiguration(f"Grid must be at least 1x1, got {self.width}x{self.height}")
        if self.spacing <= 0:
            raise InvalidConfiguration(f"Spacing must be positive, got {self.spacing}")
        if self.scale <= 0:
            raise InvalidConfiguration(f"Scale must be positive, got {self.scale}")
        radii = self.radii
        if radii.inner <= 0:
            raise InvalidConfiguration(f"Inner radius must be positive, got {radii.inner}")
        if radii.outer <= radii.inner:
            raise InvalidConfiguration(
                f"Outer radius ({radii.outer}) must be larger than inner radius ({radii.inner})"
            )
        return self

    def topology(self) -> GridTopology:
        from dotgrid.engine.topology import GridTopology

        return GridTopology(self.width, self.height, self.spacing)


@dataclass
class RenderConfig:
    """Controls rasterization and vector output."""

    # World units covered by one pixel
    pixel_size: float = 0.02
    # Anti-aliasing band, in pixels (one pixel = hard-ish edge)
    aa_width: float = 1.0
    # Padding around the grid, as a multiple of the outer radius
    margin_factor: float = 1.0
    # Shapely quad segments per quarter circle for vector output
    circle_resolution: int = 16
    # "instance" (per-connector bounding boxes) or "pixel" (per-pixel lookup)
    raster_mode: str = "instance"
    # Thread pool size for per-instance rasterization; 1 = run inline
    workers: int = 1
    # Clicks within this fraction of the spacing from a block center pick
    # the block center rather than one diagonal
    center_zone_fraction: float = 0.3

    def __post_init__(self) -> None:
        if self.pixel_size <= 0:
            raise InvalidConfiguration(f"Pixel size must be positive, got {self.pixel_size}")
        if self.aa_width < 0:
            raise InvalidConfiguration(f"Anti-aliasing width must be >= 0, got {self.aa_width}")
        if self.raster_mode not in RASTER_MODES:
            raise InvalidConfiguration(f"Unknown raster mode {self.raster_mode!r}")
        if self.workers < 1:
            raise InvalidConfiguration(f"Workers must be >= 1, got {self.workers}")

    @property
    def band(self) -> float:
        """Anti-aliasing band width in world units."""
        return self.aa_width * self.pixel_size


@dataclass
class Palette:
    """Frame colors. Defaults follow the black-on-white circle material."""

    background: RGBA = (1.0, 1.0, 1.0, 0.0)
    connector: RGBA = (0.0, 0.0, 0.0, 1.0)
    outer: RGBA = (0.0, 0.0, 0.0, 1.0)
    inner_empty: RGBA = (1.0, 1.0, 1.0, 1.0)
    inner_active: RGBA = (0.0, 0.0, 0.0, 1.0)
