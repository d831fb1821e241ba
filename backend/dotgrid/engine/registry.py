"""Render pass registry — every pass is a standalone function registered via decorator.

Usage:
    @render_pass(id="P0.01", layer=Layer.CONNECTORS, description="Connector mask")
    def connectors(ctx: FrameContext) -> None:
        ctx.layers["connectors"] = ...

Passes run in (layer, id) order. Layer order is the draw order: everything
in CONNECTORS is painted before anything in CIRCLES, with no depth test.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from dotgrid.engine.context import FrameContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    CONNECTORS = 0
    CIRCLES = 1


@dataclass
class PassSpec:
    id: str
    layer: Layer
    fn: Callable[["FrameContext"], None]
    description: str = ""


class PassRegistry:
    """Registry of render passes."""

    def __init__(self) -> None:
        self._passes: dict[str, PassSpec] = {}

    def register(self, spec: PassSpec) -> None:
        if spec.id in self._passes:
            raise ValueError(f"Duplicate render pass ID: {spec.id}")
        self._passes[spec.id] = spec
        logger.debug("Registered render pass %s (%s)", spec.id, spec.layer.name)

    def get(self, pass_id: str) -> PassSpec:
        return self._passes[pass_id]

    def get_layer(self, layer: Layer) -> list[PassSpec]:
        specs = [s for s in self._passes.values() if s.layer == layer]
        return sorted(specs, key=lambda s: s.id)

    def all(self) -> list[PassSpec]:
        """Draw order."""
        return sorted(self._passes.values(), key=lambda s: (s.layer, s.id))

    @property
    def count(self) -> int:
        return len(self._passes)


# Module-level singleton
_registry = PassRegistry()


def get_registry() -> PassRegistry:
    return _registry


def render_pass(
    *,
    id: str,
    layer: Layer,
    description: str = "",
    registry: PassRegistry | None = None,
):
    """Decorator to register a render pass function."""

    def decorator(fn: Callable[["FrameContext"], None]):
        (registry or _registry).register(PassSpec(id=id, layer=layer, fn=fn, description=description))
        return fn

    return decorator
