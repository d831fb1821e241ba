"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    dotgrid_env: str = "development"
    dotgrid_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Grid defaults for requests that omit them
    default_width: int = 10
    default_height: int = 10
    default_spacing: float = 0.9
    default_inner_radius: float = 0.4
    default_outer_radius: float = 0.5

    # Rendering
    default_pixel_size: float = 0.02
    # Upper bound on rendered pixels per frame (width * height)
    max_frame_pixels: int = 16_000_000
    # Upper bound on grid cells per request (width * height)
    max_grid_cells: int = 1_000_000
    render_workers: int = 1

    # Hit-testing: clicks this close to a block center, as a fraction of the
    # spacing, count as center clicks
    center_zone_fraction: float = 0.3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
