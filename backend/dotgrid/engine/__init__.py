"""dotgrid connector engine."""

from dotgrid.engine.errors import GridError, InvalidConfiguration, OutOfBounds
from dotgrid.engine.config import CircleRadii, GridConfig, RenderConfig, Palette
from dotgrid.engine.topology import GridTopology
from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.links import ConnectorKind, ConnectorLink, ConnectorInstance, make_link
from dotgrid.engine.region import contains, connector_sdf
from dotgrid.engine.enumerator import enumerate_connectors
from dotgrid.engine.compositor import MaskCompositor, PixelGrid
from dotgrid.engine.registry import render_pass, Layer, get_registry
from dotgrid.engine.context import FrameContext
from dotgrid.engine.frame import FrameRenderer, render_frame

__all__ = [
    "GridError",
    "InvalidConfiguration",
    "OutOfBounds",
    "CircleRadii",
    "GridConfig",
    "RenderConfig",
    "Palette",
    "GridTopology",
    "ActivationSnapshot",
    "ConnectorKind",
    "ConnectorLink",
    "ConnectorInstance",
    "make_link",
    "contains",
    "connector_sdf",
    "enumerate_connectors",
    "MaskCompositor",
    "PixelGrid",
    "render_pass",
    "Layer",
    "get_registry",
    "FrameContext",
    "FrameRenderer",
    "render_frame",
]
