"""Frame renderer — runs render passes in draw order over one FrameContext."""

from __future__ import annotations

import logging
import time

from dotgrid.engine import passes as _builtin_passes  # noqa: F401  registers P0.01 / P1.01
from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.config import CircleRadii, Palette, RenderConfig
from dotgrid.engine.context import FrameContext
from dotgrid.engine.registry import Layer, PassRegistry, get_registry

logger = logging.getLogger(__name__)


class FrameRenderer:
    """Paints every registered pass, lower layers first, no depth test."""

    def __init__(self, registry: PassRegistry | None = None) -> None:
        self.registry = registry or get_registry()

    def run(self, ctx: FrameContext) -> FrameContext:
        """Render the full frame into ``ctx.image``."""
        start = time.perf_counter()
        ordered = self.registry.all()

        logger.info(
            "Frame: %d passes queued for %dx%d grid (%d active)",
            len(ordered),
            ctx.topology.width,
            ctx.topology.height,
            ctx.snapshot.active_count,
        )

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_passes.append(spec.id)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s completed in %.1fms", spec.id, elapsed)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Frame complete: %d/%d passes, %d connectors in %.0fms",
            len(ctx.completed_passes),
            len(ordered),
            len(ctx.instances),
            total,
        )
        return ctx

    def run_layer(self, ctx: FrameContext, layer: Layer) -> FrameContext:
        """Run only the passes of one layer."""
        for spec in self.registry.get_layer(layer):
            try:
                spec.fn(ctx)
                ctx.completed_passes.append(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
        return ctx


def render_frame(
    snapshot: ActivationSnapshot,
    radii: CircleRadii,
    render: RenderConfig | None = None,
    palette: Palette | None = None,
    selection=None,
) -> FrameContext:
    """Factory-style helper: build a context covering the grid and render it."""
    ctx = FrameContext.for_grid(snapshot, radii, render=render, palette=palette, selection=selection)
    return FrameRenderer().run(ctx)
