"""Tests for frame rendering: pass order, layers and the circle material."""

from __future__ import annotations

import math

import numpy as np
import pytest

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.config import CircleRadii, Palette, RenderConfig
from dotgrid.engine.context import FrameContext
from dotgrid.engine.frame import FrameRenderer, render_frame
from dotgrid.engine.links import ConnectorKind
from dotgrid.engine.registry import Layer, PassRegistry, get_registry, render_pass
from dotgrid.engine.selection import ConnectorSelection
from dotgrid.engine.topology import GridTopology

RED = (1.0, 0.0, 0.0, 1.0)
GREEN = (0.0, 1.0, 0.0, 1.0)
BLUE = (0.0, 0.0, 1.0, 1.0)
WHITE = (1.0, 1.0, 1.0, 1.0)
CLEAR = (0.0, 0.0, 0.0, 0.0)

PALETTE = Palette(background=CLEAR, connector=RED, outer=GREEN, inner_empty=BLUE, inner_active=WHITE)


def _pixel(ctx: FrameContext, x: float, y: float) -> np.ndarray:
    i = math.floor((x - ctx.grid.xmin) / ctx.grid.size)
    j = math.floor((y - ctx.grid.ymin) / ctx.grid.size)
    return ctx.image[j, i]


@pytest.fixture
def row_frame() -> FrameContext:
    """Three cells in a row; the left two are active, the right one is not."""
    topo = GridTopology(3, 1, 1.0)
    snap = ActivationSnapshot.from_cells(topo, [(0, 0), (1, 0)])
    render = RenderConfig(pixel_size=0.01, aa_width=0.0)
    return render_frame(snap, CircleRadii(0.3, 0.45), render=render, palette=PALETTE)


class TestDrawOrder:
    def test_passes_run_in_layer_order(self, row_frame):
        assert row_frame.completed_passes == ["P0.01", "P1.01"]
        assert row_frame.errors == {}
        assert set(row_frame.layers) == {"connectors", "circles"}

    def test_connector_between_active_cells(self, row_frame):
        np.testing.assert_allclose(_pixel(row_frame, -0.5, 0.0), RED)

    def test_active_inner_disc_painted_over_connector(self, row_frame):
        np.testing.assert_allclose(_pixel(row_frame, -1.0, 0.0), WHITE)
        np.testing.assert_allclose(_pixel(row_frame, 0.0, 0.2), WHITE)

    def test_inactive_cell_shows_ring_and_empty_disc(self, row_frame):
        np.testing.assert_allclose(_pixel(row_frame, 1.0, 0.0), BLUE)
        np.testing.assert_allclose(_pixel(row_frame, 1.0, 0.4), GREEN)

    def test_active_ring_left_transparent(self, row_frame):
        np.testing.assert_allclose(_pixel(row_frame, -1.0, 0.38), CLEAR)

    def test_frame_covers_outer_circles(self, row_frame):
        assert row_frame.grid.xmin == pytest.approx(-1.45)
        assert row_frame.grid.ymin == pytest.approx(-0.45)
        assert row_frame.image.shape == (*row_frame.grid.shape, 4)

    def test_instances_recorded(self, row_frame):
        assert [inst.kind for inst in row_frame.instances] == [ConnectorKind.HORIZONTAL]


class TestSelection:
    def test_empty_selection_hides_connectors(self):
        topo = GridTopology(3, 1, 1.0)
        snap = ActivationSnapshot.from_cells(topo, [(0, 0), (1, 0)])
        render = RenderConfig(pixel_size=0.01, aa_width=0.0)
        ctx = render_frame(snap, CircleRadii(0.3, 0.45), render=render, palette=PALETTE, selection=ConnectorSelection())
        assert ctx.instances == []
        np.testing.assert_allclose(_pixel(ctx, -0.5, 0.0), CLEAR)
        assert not ctx.layers["connectors"].any()


class TestRenderer:
    def test_builtin_passes_registered(self):
        registry = get_registry()
        assert registry.get("P0.01").layer is Layer.CONNECTORS
        assert registry.get("P1.01").layer is Layer.CIRCLES

    def test_failed_pass_recorded(self, full_block, block_radii):
        registry = PassRegistry()
        calls = []

        @render_pass(id="P1.50", layer=Layer.CIRCLES, registry=registry)
        def late(ctx):
            calls.append("late")

        @render_pass(id="P0.50", layer=Layer.CONNECTORS, registry=registry)
        def broken(ctx):
            raise RuntimeError("boom")

        ctx = FrameContext.for_grid(full_block, block_radii, render=RenderConfig(pixel_size=0.1))
        FrameRenderer(registry).run(ctx)
        assert ctx.errors == {"P0.50": "boom"}
        assert ctx.completed_passes == ["P1.50"]
        assert calls == ["late"]

    def test_run_layer(self, full_block, block_radii):
        ctx = FrameContext.for_grid(full_block, block_radii, render=RenderConfig(pixel_size=0.05))
        FrameRenderer().run_layer(ctx, Layer.CONNECTORS)
        assert ctx.completed_passes == ["P0.01"]
        assert "circles" not in ctx.layers
        assert len(ctx.instances) == 4

    def test_background_fill(self, full_block, block_radii):
        palette = Palette(background=(0.2, 0.4, 0.6, 1.0))
        ctx = FrameContext.for_grid(full_block, block_radii, render=RenderConfig(pixel_size=0.1), palette=palette)
        np.testing.assert_allclose(ctx.image[0, 0], (0.2, 0.4, 0.6, 1.0))
