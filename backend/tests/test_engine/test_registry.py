"""Tests for the render pass registry."""

from __future__ import annotations

import pytest

from dotgrid.engine.registry import Layer, PassRegistry, PassSpec, render_pass


def _noop(ctx):
    return None


def test_draw_order_sorted_by_layer_then_id():
    registry = PassRegistry()
    registry.register(PassSpec(id="P1.01", layer=Layer.CIRCLES, fn=_noop))
    registry.register(PassSpec(id="P0.02", layer=Layer.CONNECTORS, fn=_noop))
    registry.register(PassSpec(id="P0.01", layer=Layer.CONNECTORS, fn=_noop))
    assert [s.id for s in registry.all()] == ["P0.01", "P0.02", "P1.01"]
    assert [s.id for s in registry.get_layer(Layer.CONNECTORS)] == ["P0.01", "P0.02"]
    assert registry.count == 3


def test_duplicate_id_rejected():
    registry = PassRegistry()
    registry.register(PassSpec(id="P0.01", layer=Layer.CONNECTORS, fn=_noop))
    with pytest.raises(ValueError, match="Duplicate"):
        registry.register(PassSpec(id="P0.01", layer=Layer.CIRCLES, fn=_noop))


def test_decorator_returns_function():
    registry = PassRegistry()

    @render_pass(id="P0.10", layer=Layer.CONNECTORS, description="test", registry=registry)
    def my_pass(ctx):
        return None

    assert callable(my_pass)
    assert registry.get("P0.10").fn is my_pass
    assert registry.get("P0.10").description == "test"
